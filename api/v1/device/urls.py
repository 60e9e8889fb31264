"""
URL configuration for device API endpoints.
"""

from django.urls import path

from api.v1.device import views

app_name = "devices"

urlpatterns = [
    path("", views.DeviceListView.as_view(), name="device-list"),
    path("batch", views.DeviceBatchView.as_view(), name="device-batch"),
    path("batch-license", views.DeviceBatchLicenseView.as_view(), name="device-batch-license"),
    path("products", views.DeviceProductListView.as_view(), name="device-products"),
    path("sn/<str:sn>", views.DeviceBySNView.as_view(), name="device-by-sn"),
    path("<int:device_id>", views.DeviceDetailView.as_view(), name="device-detail"),
    path(
        "activation-file/<str:sn>",
        views.ActivationFileView.as_view(),
        name="device-activation-file",
    ),
]
