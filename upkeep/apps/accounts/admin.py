from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("action", "resource", "resource_id", "user", "ip_address", "created_at")
    list_filter = ("action", "resource")
    search_fields = ("action", "resource", "resource_id", "user__username")
    readonly_fields = (
        "user",
        "action",
        "resource",
        "resource_id",
        "details",
        "ip_address",
        "user_agent",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
