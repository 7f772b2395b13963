from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from .models import Machine, Site


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "machine_count")
    search_fields = ("name", "location")

    @admin.display(description="Machines")
    def machine_count(self, obj):
        return obj.machines.count()


@admin.register(Machine)
class MachineAdmin(SimpleHistoryAdmin):
    list_display = ("name", "site", "machine_type", "status", "next_maintenance_date")
    search_fields = ("name", "machine_type", "site__name")
    list_filter = ("status", "machine_type", "site")
    autocomplete_fields = ("site",)
    readonly_fields = ("total_hours_run", "created_at", "updated_at")
