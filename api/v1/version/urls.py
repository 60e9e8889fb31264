"""
URL configuration for version API endpoints.
"""

from django.urls import path

from api.v1.version import views

app_name = "versions"

urlpatterns = [
    path("firmware", views.FirmwareVersionListView.as_view(), name="firmware-list"),
    path(
        "firmware/<int:firmware_version_id>",
        views.FirmwareVersionDetailView.as_view(),
        name="firmware-detail",
    ),
    path("software", views.SoftwareVersionListView.as_view(), name="software-list"),
    path(
        "software/<int:software_version_id>",
        views.SoftwareVersionDetailView.as_view(),
        name="software-detail",
    ),
]
