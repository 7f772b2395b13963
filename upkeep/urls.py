from django.contrib import admin
from django.urls import include, path

from upkeep.apps.core.views import healthz

urlpatterns = [
    path("healthz", healthz, name="healthz"),  # Health check for the load balancer
    path("admin/", admin.site.urls),  # Django admin app
    #
    # JSON API for the dashboard
    #
    path("api/auth/", include("upkeep.apps.accounts.urls")),
    path("api/", include("upkeep.apps.catalog.urls")),
    path("api/", include("upkeep.apps.maintenance.urls")),
]
