"""
URL configuration for license type API endpoints.
"""

from django.urls import path

from api.v1.license_type import views

app_name = "license_types"

urlpatterns = [
    path("", views.LicenseTypeListView.as_view(), name="license-type-list"),
    path(
        "<int:license_type_id>",
        views.LicenseTypeDetailView.as_view(),
        name="license-type-detail",
    ),
    path(
        "<int:license_type_id>/features",
        views.LicenseTypeFeaturesView.as_view(),
        name="license-type-features",
    ),
]
