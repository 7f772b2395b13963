"""Tests for the template reconciler."""

from unittest.mock import patch

from django.test import TestCase, tag

from upkeep.apps.catalog.models import Machine
from upkeep.apps.core.test_utils import (
    create_machine,
    create_site,
    create_task,
    create_template,
)
from upkeep.apps.maintenance import sync
from upkeep.apps.maintenance.models import (
    Frequency,
    MaintenanceTask,
    MaintenanceTaskTemplate,
    Priority,
)


def assert_reconciled(testcase, machine_type):
    """Every machine of the type has exactly one linked task per template."""
    templates = MaintenanceTaskTemplate.objects.for_machine_type(machine_type)
    for machine in Machine.objects.of_type(machine_type):
        for template in templates:
            testcase.assertEqual(
                machine.maintenance_tasks.filter(
                    task=template.task, task_template=template
                ).count(),
                1,
                f"{machine} should carry exactly one {template.task!r}",
            )


@tag("models")
class SynchronizeMachineTypeTests(TestCase):
    def setUp(self):
        self.site = create_site()
        self.pumps = [
            create_machine(name=f"Pump {n}", site=self.site, machine_type="Pump")
            for n in range(1, 4)
        ]
        self.oil = create_template(task="Check oil", priority=Priority.HIGH)
        self.seals = create_template(task="Check seals", frequency=Frequency.WEEKLY)

    def test_fresh_machines_receive_every_template(self):
        result = sync.synchronize_machine_type("Pump")

        self.assertEqual(
            result,
            sync.SyncResult(
                machines_synchronized=3, tasks_added=6, tasks_removed=0, tasks_updated=0
            ),
        )
        assert_reconciled(self, "Pump")

    def test_added_tasks_copy_template_fields(self):
        sync.synchronize_machine_type("Pump")

        task = self.pumps[0].maintenance_tasks.get(task="Check seals")
        self.assertEqual(task.task_template, self.seals)
        self.assertEqual(task.priority, Priority.MEDIUM)
        self.assertEqual(task.frequency, Frequency.WEEKLY)
        self.assertFalse(task.completed)

    def test_second_run_reports_no_work(self):
        sync.synchronize_machine_type("Pump")

        result = sync.synchronize_machine_type("Pump")

        self.assertEqual(result.machines_synchronized, 3)
        self.assertEqual(result.tasks_added, 0)
        self.assertEqual(result.tasks_removed, 0)
        self.assertEqual(result.tasks_updated, 0)

    def test_unmatched_manual_task_is_removed(self):
        create_task(self.pumps[0], task="Polish chrome")

        result = sync.synchronize_machine_type("Pump")

        self.assertEqual(result.tasks_removed, 1)
        self.assertFalse(MaintenanceTask.objects.filter(task="Polish chrome").exists())

    def test_manual_task_matching_template_text_is_linked(self):
        manual = create_task(self.pumps[0], task="Check oil", priority=Priority.LOW)

        result = sync.synchronize_machine_type("Pump")

        manual.refresh_from_db()
        self.assertEqual(manual.task_template, self.oil)
        self.assertEqual(manual.priority, Priority.HIGH)
        self.assertEqual(result.tasks_added, 5)
        self.assertEqual(result.tasks_updated, 1)
        assert_reconciled(self, "Pump")

    def test_duplicate_manual_task_stays_unlinked(self):
        sync.synchronize_machine_type("Pump")
        duplicate = create_task(self.pumps[0], task="Check oil")

        result = sync.synchronize_machine_type("Pump")

        duplicate.refresh_from_db()
        self.assertIsNone(duplicate.task_template)
        self.assertEqual(
            self.pumps[0].maintenance_tasks.filter(task_template=self.oil).count(), 1
        )
        self.assertEqual(result.tasks_updated, 0)

    def test_only_first_of_two_manual_copies_is_linked(self):
        first = create_task(self.pumps[0], task="Check oil")
        second = create_task(self.pumps[0], task="Check oil")

        result = sync.synchronize_machine_type("Pump")

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.task_template, self.oil)
        self.assertIsNone(second.task_template)
        self.assertEqual(result.tasks_updated, 1)
        assert_reconciled(self, "Pump")

    def test_task_linked_to_other_type_template_is_left_alone(self):
        compressor_oil = create_template(
            task="Check oil", machine_type="Compressor", priority=Priority.LOW
        )
        foreign = create_task(
            self.pumps[0],
            task="Check oil",
            priority=Priority.LOW,
            frequency=Frequency.YEARLY,
            task_template=compressor_oil,
        )

        result = sync.synchronize_machine_type("Pump")

        foreign.refresh_from_db()
        self.assertEqual(foreign.task_template, compressor_oil)
        self.assertEqual(foreign.priority, Priority.LOW)
        self.assertEqual(foreign.frequency, Frequency.YEARLY)
        self.assertEqual(self.pumps[0].maintenance_tasks.filter(task="Check oil").count(), 1)
        self.assertEqual(result.tasks_updated, 0)
        self.assertEqual(result.tasks_added, 5)

    def test_template_edits_reach_linked_tasks(self):
        sync.synchronize_machine_type("Pump")
        self.oil.priority = Priority.LOW
        self.oil.frequency = Frequency.YEARLY
        self.oil.save()

        result = sync.synchronize_machine_type("Pump")

        self.assertEqual(result.tasks_updated, 3)
        for pump in self.pumps:
            task = pump.maintenance_tasks.get(task="Check oil")
            self.assertEqual(task.priority, Priority.LOW)
            self.assertEqual(task.frequency, Frequency.YEARLY)

    def test_completion_state_survives_sync(self):
        sync.synchronize_machine_type("Pump")
        task = self.pumps[0].maintenance_tasks.get(task="Check oil")
        task.completed = True
        task.completed_by = "Eddie"
        task.save()

        sync.synchronize_machine_type("Pump")

        task.refresh_from_db()
        self.assertTrue(task.completed)
        self.assertEqual(task.completed_by, "Eddie")

    def test_renamed_template_replaces_task(self):
        sync.synchronize_machine_type("Pump")
        self.oil.task = "Check oil level"
        self.oil.save()

        result = sync.synchronize_machine_type("Pump")

        self.assertEqual(result.tasks_removed, 3)
        self.assertEqual(result.tasks_added, 3)
        self.assertFalse(MaintenanceTask.objects.filter(task="Check oil").exists())
        assert_reconciled(self, "Pump")

    def test_other_machine_types_untouched(self):
        compressor = create_machine(site=self.site, machine_type="Compressor")
        manual = create_task(compressor, task="Drain condensate")

        sync.synchronize_machine_type("Pump")

        self.assertTrue(MaintenanceTask.objects.filter(pk=manual.pk).exists())
        self.assertEqual(compressor.maintenance_tasks.count(), 1)

    def test_type_without_templates_is_a_noop(self):
        machine = create_machine(site=self.site, machine_type="Lathe")
        manual = create_task(machine, task="Oil ways")

        result = sync.synchronize_machine_type("Lathe")

        self.assertEqual(result, sync.SyncResult())
        self.assertTrue(MaintenanceTask.objects.filter(pk=manual.pk).exists())

    def test_type_without_machines_reports_zero(self):
        create_template(task="Sharpen", machine_type="Grinder")

        result = sync.synchronize_machine_type("Grinder")

        self.assertEqual(result, sync.SyncResult())

    def test_failure_keeps_earlier_machines_reconciled(self):
        original = sync.synchronize_machine
        calls = []

        def fail_on_second(machine, templates):
            calls.append(machine.pk)
            if len(calls) == 2:
                raise RuntimeError("store unavailable")
            return original(machine, templates)

        with (
            patch.object(sync, "synchronize_machine", side_effect=fail_on_second),
            self.assertRaises(RuntimeError),
        ):
            sync.synchronize_machine_type("Pump")

        first, second, third = sorted(self.pumps, key=lambda m: m.pk)
        self.assertEqual(first.maintenance_tasks.count(), 2)
        self.assertEqual(second.maintenance_tasks.count(), 0)
        self.assertEqual(third.maintenance_tasks.count(), 0)


@tag("models")
class SyncResultTests(TestCase):
    def test_addition_sums_each_counter(self):
        total = sync.SyncResult(1, 2, 3, 4) + sync.SyncResult(1, 0, 1, 0)
        self.assertEqual(total, sync.SyncResult(2, 2, 4, 4))

    def test_as_dict_uses_wire_names(self):
        self.assertEqual(
            sync.SyncResult(3, 0, 6, 0).as_dict(),
            {"machinesSynchronized": 3, "tasksRemoved": 0, "tasksAdded": 6, "tasksUpdated": 0},
        )


@tag("models")
class UpdateTemplateTests(TestCase):
    def setUp(self):
        site = create_site()
        self.pumps = [create_machine(site=site, machine_type="Pump") for _ in range(2)]
        self.compressors = [create_machine(site=site, machine_type="Compressor") for _ in range(3)]
        self.template = create_template(task="Inspect housing", machine_type="Pump")
        create_template(task="Check oil", machine_type="Pump")
        create_template(task="Drain condensate", machine_type="Compressor")
        sync.synchronize_machine_type("Pump")
        sync.synchronize_machine_type("Compressor")

    def test_moving_template_moves_its_tasks(self):
        self.template.machine_type = "Compressor"
        self.template.save()

        result = sync.update_template(self.template, previous_machine_type="Pump")

        self.assertFalse(
            MaintenanceTask.objects.filter(
                task_template=self.template, machine__machine_type="Pump"
            ).exists()
        )
        self.assertEqual(result.tasks_removed, 2)
        self.assertEqual(result.tasks_added, 3)
        self.assertEqual(result.machines_synchronized, 3)
        assert_reconciled(self, "Compressor")
        assert_reconciled(self, "Pump")

    def test_edit_without_move_updates_linked_tasks(self):
        self.template.priority = Priority.HIGH
        self.template.save()

        result = sync.update_template(self.template, previous_machine_type="Pump")

        self.assertEqual(result.tasks_updated, 2)
        self.assertEqual(result.tasks_removed, 0)
        self.assertEqual(
            set(
                MaintenanceTask.objects.linked_to(self.template).values_list("priority", flat=True)
            ),
            {Priority.HIGH},
        )


@tag("models")
class DeleteTemplateTests(TestCase):
    def test_deletes_every_linked_task_and_reports_count(self):
        site = create_site()
        machines = [create_machine(site=site) for _ in range(3)]
        template = create_template(task="Check oil")
        keep = create_template(task="Check seals")
        sync.synchronize_machine_type("Pump")

        deleted = sync.delete_template(template)

        self.assertEqual(deleted, 3)
        self.assertFalse(MaintenanceTask.objects.filter(task="Check oil").exists())
        self.assertEqual(MaintenanceTask.objects.linked_to(keep).count(), len(machines))


@tag("models")
class ApplyTemplatesToMachineTests(TestCase):
    def setUp(self):
        self.machine = create_machine(machine_type="Pump")

    def test_creates_one_linked_task_per_template(self):
        templates = [create_template(task="Check oil"), create_template(task="Check seals")]

        tasks = sync.apply_templates_to_machine(self.machine)

        self.assertEqual(len(tasks), 2)
        self.assertEqual(
            {t.task_template_id for t in tasks}, {t.pk for t in templates}
        )

    def test_refuses_machine_with_existing_tasks(self):
        create_template(task="Check oil")
        create_task(self.machine, task="Something else")

        with self.assertRaises(sync.TasksAlreadyExistError) as ctx:
            sync.apply_templates_to_machine(self.machine)

        self.assertEqual(ctx.exception.task_count, 1)
        self.assertEqual(self.machine.maintenance_tasks.count(), 1)

    def test_no_templates_for_type(self):
        with self.assertRaises(sync.NoTemplatesError):
            sync.apply_templates_to_machine(self.machine)
