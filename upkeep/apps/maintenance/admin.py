from django.contrib import admin, messages
from simple_history.admin import SimpleHistoryAdmin

from . import sync
from .models import MaintenanceTask, MaintenanceTaskTemplate, OperationLog


@admin.register(OperationLog)
class OperationLogAdmin(admin.ModelAdmin):
    list_display = ("machine", "date", "total_hours", "engineer", "operator")
    list_filter = ("machine__site", "maintenance_checklist_completed")
    search_fields = ("machine__name", "engineer", "operator")
    autocomplete_fields = ("machine",)
    date_hierarchy = "date"

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("machine")


@admin.register(MaintenanceTask)
class MaintenanceTaskAdmin(admin.ModelAdmin):
    list_display = ("task", "machine", "priority", "frequency", "completed", "task_template")
    list_filter = ("completed", "priority", "frequency", "machine__machine_type")
    search_fields = ("task", "machine__name")
    autocomplete_fields = ("machine", "task_template")
    readonly_fields = ("created_at", "updated_at")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("machine", "task_template")


@admin.register(MaintenanceTaskTemplate)
class MaintenanceTaskTemplateAdmin(SimpleHistoryAdmin):
    list_display = ("task", "machine_type", "priority", "frequency")
    list_filter = ("machine_type", "priority", "frequency")
    search_fields = ("task", "machine_type")
    readonly_fields = ("created_at", "updated_at")
    actions = ["synchronize_selected_types"]

    @admin.action(description="Synchronize tasks for the selected templates' machine types")
    def synchronize_selected_types(self, request, queryset):
        machine_types = sorted(set(queryset.values_list("machine_type", flat=True)))
        for machine_type in machine_types:
            result = sync.synchronize_machine_type(machine_type)
            self.message_user(
                request,
                f"{machine_type}: {result.machines_synchronized} machines, "
                f"{result.tasks_added} added, {result.tasks_removed} removed, "
                f"{result.tasks_updated} updated",
                messages.SUCCESS,
            )

    def save_model(self, request, obj, form, change):
        """Push the saved template out to machines, moving its tasks if the type changed."""
        previous_machine_type = None
        if change:
            previous_machine_type = (
                MaintenanceTaskTemplate.objects.filter(pk=obj.pk)
                .values_list("machine_type", flat=True)
                .first()
            )
        super().save_model(request, obj, form, change)
        if previous_machine_type is None:
            sync.synchronize_machine_type(obj.machine_type)
        else:
            sync.update_template(obj, previous_machine_type)

    def delete_model(self, request, obj):
        sync.delete_template(obj)

    def delete_queryset(self, request, queryset):
        for template in queryset:
            sync.delete_template(template)
