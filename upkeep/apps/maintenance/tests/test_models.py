"""Tests for maintenance models and querysets."""

from django.test import TestCase, tag

from upkeep.apps.core.test_utils import create_machine, create_task, create_template
from upkeep.apps.maintenance.models import (
    Frequency,
    MaintenanceTask,
    MaintenanceTaskTemplate,
    Priority,
)


@tag("models")
class MaintenanceTaskModelTests(TestCase):
    def setUp(self):
        self.machine = create_machine()
        self.template = create_template(
            task="Check oil", priority=Priority.HIGH, frequency=Frequency.WEEKLY
        )

    def test_from_template_builds_unsaved_linked_task(self):
        task = MaintenanceTask.from_template(self.template, self.machine)

        self.assertIsNone(task.pk)
        self.assertEqual(task.task_template, self.template)
        self.assertEqual(task.priority, Priority.HIGH)
        self.assertEqual(task.frequency, Frequency.WEEKLY)
        self.assertFalse(task.completed)

    def test_copy_template_fields_reports_changes(self):
        task = create_task(self.machine, task="Check oil", priority=Priority.LOW)

        changed = task.copy_template_fields(self.template)

        self.assertEqual(changed, ["priority", "frequency"])
        self.assertEqual(task.copy_template_fields(self.template), [])

    def test_deleting_template_unlinks_remaining_tasks(self):
        task = create_task(self.machine, task="Check oil", task_template=self.template)

        self.template.delete()

        task.refresh_from_db()
        self.assertIsNone(task.task_template)

    def test_by_priority_orders_high_first(self):
        create_template(task="b", priority=Priority.LOW)
        create_template(task="a", priority=Priority.MEDIUM)

        ordered = MaintenanceTaskTemplate.objects.by_priority("task")

        self.assertEqual([t.priority for t in ordered], ["high", "medium", "low"])

    def test_template_history(self):
        self.template.priority = Priority.LOW
        self.template.save()
        self.assertEqual(self.template.history.count(), 2)
