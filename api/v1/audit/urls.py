"""
URL configuration for audit log API endpoints.
"""

from django.urls import path

from api.v1.audit import views

app_name = "audit"

urlpatterns = [
    path("", views.AuditLogListView.as_view(), name="audit-log-list"),
]
