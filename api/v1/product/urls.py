"""
URL configuration for product API endpoints.
"""

from django.urls import path

from api.v1.product import views

app_name = "products"

urlpatterns = [
    path("", views.ProductListView.as_view(), name="product-list"),
    path("<int:product_id>", views.ProductDetailView.as_view(), name="product-detail"),
    path(
        "<int:product_id>/managers",
        views.ProductManagerListView.as_view(),
        name="product-managers",
    ),
    path(
        "<int:product_id>/managers/<int:user_id>",
        views.ProductManagerDetailView.as_view(),
        name="product-manager-detail",
    ),
]
