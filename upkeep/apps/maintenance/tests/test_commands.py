"""Tests for maintenance management commands."""

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, tag

from upkeep.apps.accounts.models import AuditLog
from upkeep.apps.catalog.models import Machine
from upkeep.apps.core.test_utils import create_machine, create_template
from upkeep.apps.maintenance.models import MaintenanceTask, MaintenanceTaskTemplate


@tag("commands")
class SynchronizeMachineTypesCommandTests(TestCase):
    def setUp(self):
        create_machine(machine_type="Pump")
        create_machine(machine_type="Compressor")
        create_template(task="Check oil", machine_type="Pump")
        create_template(task="Drain condensate", machine_type="Compressor")

    def test_named_type_only(self):
        out = StringIO()

        call_command("synchronize_machine_types", "Pump", stdout=out)

        self.assertIn("Pump: 1 machines, 1 added, 0 removed, 0 updated", out.getvalue())
        self.assertEqual(MaintenanceTask.objects.get().task, "Check oil")
        entry = AuditLog.objects.get()
        self.assertEqual(entry.details["trigger"], "command")

    def test_all_types_by_default(self):
        out = StringIO()

        call_command("synchronize_machine_types", stdout=out)

        self.assertEqual(MaintenanceTask.objects.count(), 2)
        self.assertIn("Synchronized 2 machines across 2 machine types.", out.getvalue())

    def test_empty_database(self):
        Machine.objects.all().delete()
        MaintenanceTaskTemplate.objects.all().delete()
        with self.assertRaises(CommandError):
            call_command("synchronize_machine_types", stdout=StringIO())


@tag("commands")
class CreateSampleDataCommandTests(TestCase):
    def test_seeds_users_machines_and_tasks(self):
        call_command("create_sample_data", stdout=StringIO())

        self.assertTrue(get_user_model().objects.filter(username="admin", is_superuser=True).exists())
        self.assertEqual(Machine.objects.of_type("Pump").count(), 3)
        self.assertEqual(MaintenanceTask.objects.filter(machine__machine_type="Pump").count(), 9)

    def test_refuses_non_empty_database(self):
        create_machine()
        with self.assertRaises(CommandError):
            call_command("create_sample_data", stdout=StringIO())


@tag("commands")
class CheckWorkerCommandTests(TestCase):
    def test_reports_empty_queue(self):
        out = StringIO()
        call_command("check_worker", stdout=out)
        self.assertIn("Queue is empty", out.getvalue())
        self.assertIn("No recent failures", out.getvalue())
