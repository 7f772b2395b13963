"""Seed a development database with users, a site, pumps and their templates."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import connection, transaction

from upkeep.apps.catalog.models import Machine, Site
from upkeep.apps.maintenance.models import Frequency, MaintenanceTaskTemplate, Priority
from upkeep.apps.maintenance.sync import synchronize_machine_type

SAMPLE_PASSWORD = "upkeep-sample"

TEMPLATES = {
    "Pump": [
        ("Check oil", Priority.HIGH, Frequency.DAILY),
        ("Check seals", Priority.MEDIUM, Frequency.WEEKLY),
        ("Replace impeller", Priority.LOW, Frequency.YEARLY),
    ],
    "Compressor": [
        ("Drain condensate", Priority.MEDIUM, Frequency.DAILY),
        ("Inspect belts", Priority.MEDIUM, Frequency.WEEKLY),
    ],
}

MACHINES = [
    ("Pump 1", "Pump", 8),
    ("Pump 2", "Pump", 12),
    ("Pump 3", "Pump", 24),
    ("Compressor A", "Compressor", 10),
]


class Command(BaseCommand):
    help = "Create sample users, machines and task templates (dev only)"

    def handle(self, *args, **options):
        # SQLite only (blocks production PostgreSQL)
        if "sqlite" not in connection.settings_dict["ENGINE"].lower():
            raise CommandError(
                "This command only runs on SQLite databases (local dev environments)"
            )
        user_model = get_user_model()
        if user_model.objects.exists() or Machine.objects.exists():
            raise CommandError(
                "Database already contains data. This command only runs on empty databases."
            )

        with transaction.atomic():
            user_model.objects.create_superuser(
                username="admin",
                email="admin@example.com",
                password=SAMPLE_PASSWORD,
                first_name="Ada",
                last_name="Admin",
            )
            user_model.objects.create_user(
                username="engineer",
                email="engineer@example.com",
                password=SAMPLE_PASSWORD,
                first_name="Eddie",
                last_name="Engineer",
            )
            self.stdout.write("Created users: admin, engineer")

            site = Site.objects.create(name="North Plant", location="Industrial Estate, Unit 4")
            for name, machine_type, hours in MACHINES:
                Machine.objects.create(
                    name=name, site=site, machine_type=machine_type, desired_daily_hours=hours
                )
                self.stdout.write(f"Created machine: {name}")

            for machine_type, rows in TEMPLATES.items():
                for task, priority, frequency in rows:
                    MaintenanceTaskTemplate.objects.create(
                        task=task, priority=priority, frequency=frequency, machine_type=machine_type
                    )
                result = synchronize_machine_type(machine_type)
                self.stdout.write(
                    f"Created {len(rows)} {machine_type} templates, "
                    f"{result.tasks_added} tasks"
                )

        self.stdout.write(
            self.style.SUCCESS(f"Sample data created. Password for both users: {SAMPLE_PASSWORD}")
        )
