"""Run the template reconciler from the command line."""

from django.core.management.base import BaseCommand, CommandError

from upkeep.apps.accounts.audit import record_audit_log
from upkeep.apps.catalog.models import Machine
from upkeep.apps.maintenance.models import MaintenanceTaskTemplate
from upkeep.apps.maintenance.sync import SyncResult, synchronize_machine_type


class Command(BaseCommand):
    help = (
        "Synchronize machine tasks with their task templates. "
        "With no arguments every machine type in use is synchronized."
    )

    def add_arguments(self, parser):
        parser.add_argument("machine_types", nargs="*", metavar="TYPE")

    def handle(self, *args, **options):
        machine_types = options["machine_types"]
        if not machine_types:
            machine_types = sorted(
                set(Machine.objects.machine_types())
                | set(MaintenanceTaskTemplate.objects.values_list("machine_type", flat=True))
            )
        if not machine_types:
            raise CommandError("No machine types to synchronize.")

        total = SyncResult()
        for machine_type in machine_types:
            result = synchronize_machine_type(machine_type)
            total += result
            self.stdout.write(
                f"{machine_type}: {result.machines_synchronized} machines, "
                f"{result.tasks_added} added, {result.tasks_removed} removed, "
                f"{result.tasks_updated} updated"
            )
            record_audit_log(
                None,
                "SYNCHRONIZE_MACHINE_TYPE",
                "MaintenanceTask",
                details={"machineType": machine_type, "trigger": "command", **result.as_dict()},
            )

        self.stdout.write(
            self.style.SUCCESS(
                f"Synchronized {total.machines_synchronized} machines "
                f"across {len(machine_types)} machine types."
            )
        )
