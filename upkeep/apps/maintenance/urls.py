from django.urls import path

from . import views

urlpatterns = [
    path("operation-logs", views.OperationLogListView.as_view(), name="api-operation-log-list"),
    path(
        "maintenance-tasks",
        views.MaintenanceTaskListView.as_view(),
        name="api-maintenance-task-list",
    ),
    path(
        "maintenance-tasks/<int:pk>",
        views.MaintenanceTaskDetailView.as_view(),
        name="api-maintenance-task-detail",
    ),
    path(
        "maintenance-task-templates",
        views.TaskTemplateListView.as_view(),
        name="api-task-template-list",
    ),
    path(
        "maintenance-task-templates/<int:pk>",
        views.TaskTemplateDetailView.as_view(),
        name="api-task-template-detail",
    ),
    path(
        "machines/<int:pk>/apply-task-templates",
        views.ApplyTaskTemplatesView.as_view(),
        name="api-apply-task-templates",
    ),
    # path: machine types are free text and may contain "/"
    path(
        "synchronize-machine-type/<path:machine_type>",
        views.SynchronizeMachineTypeView.as_view(),
        name="api-synchronize-machine-type",
    ),
]
