from django.apps import AppConfig


class MaintenanceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "upkeep.apps.maintenance"
    verbose_name = "Maintenance"

    def ready(self):
        from . import signals  # noqa: F401 registers @receiver handlers
