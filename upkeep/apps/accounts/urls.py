from django.urls import path

from . import views

urlpatterns = [
    path("login", views.LoginView.as_view(), name="api-login"),
    path("logout", views.LogoutView.as_view(), name="api-logout"),
    path("profile", views.ProfileView.as_view(), name="api-profile"),
    path("audit-logs", views.AuditLogListView.as_view(), name="api-audit-logs"),
]
