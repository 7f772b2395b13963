from django.urls import path

from . import views

urlpatterns = [
    path("sites", views.SiteListView.as_view(), name="api-site-list"),
    path("sites/<int:pk>", views.SiteDetailView.as_view(), name="api-site-detail"),
    path("machines", views.MachineListView.as_view(), name="api-machine-list"),
    path("machines/<int:pk>", views.MachineDetailView.as_view(), name="api-machine-detail"),
    path("machine-types", views.MachineTypeListView.as_view(), name="api-machine-types"),
]
