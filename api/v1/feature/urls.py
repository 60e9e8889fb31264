"""
URL configuration for feature API endpoints.
"""

from django.urls import path

from api.v1.feature import views

app_name = "features"

urlpatterns = [
    path("", views.FeatureListView.as_view(), name="feature-list"),
    path("<int:feature_id>", views.FeatureDetailView.as_view(), name="feature-detail"),
]
