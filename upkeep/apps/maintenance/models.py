"""Maintenance domain models."""

from __future__ import annotations

from django.db import models
from django.db.models import Case, IntegerField, Value, When
from simple_history.models import HistoricalRecords

from upkeep.apps.catalog.models import Machine
from upkeep.apps.core.models import TimeStampedMixin

# Fields a template stamps onto every task it produces
TEMPLATE_FIELDS = ("task", "priority", "frequency")


class Priority(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"


class Frequency(models.TextChoices):
    DAILY = "daily", "Daily"
    WEEKLY = "weekly", "Weekly"
    YEARLY = "yearly", "Yearly"


PRIORITY_RANK = Case(
    When(priority=Priority.HIGH, then=Value(0)),
    When(priority=Priority.MEDIUM, then=Value(1)),
    When(priority=Priority.LOW, then=Value(2)),
    default=Value(3),
    output_field=IntegerField(),
)


class OperationLog(TimeStampedMixin):
    """One day's run of a machine, as recorded by the engineer on shift."""

    machine = models.ForeignKey(Machine, on_delete=models.CASCADE, related_name="operation_logs")
    date = models.DateTimeField(db_index=True)
    start_time = models.CharField(max_length=5, help_text="HH:MM")
    end_time = models.CharField(max_length=5, help_text="HH:MM")
    total_hours = models.PositiveIntegerField(default=0)
    engineer = models.CharField(max_length=200)
    operator = models.CharField(max_length=200)
    not_operated_reason = models.CharField(
        max_length=500,
        blank=True,
        help_text="Why the machine did not run, if it didn't",
    )
    maintenance_checklist_completed = models.BooleanField(default=False)

    class Meta:
        ordering = ["-date", "-id"]

    def __str__(self) -> str:
        return f"{self.machine.name} – {self.date:%Y-%m-%d}"


class PriorityOrderingMixin:
    def by_priority(self, *then: str):
        """Order high priority first, then medium, then low, then by ``then``."""
        return self.annotate(priority_rank=PRIORITY_RANK).order_by("priority_rank", *then)


class MaintenanceTaskTemplateQuerySet(PriorityOrderingMixin, models.QuerySet):
    def for_machine_type(self, machine_type: str):
        return self.filter(machine_type=machine_type)


class MaintenanceTaskTemplate(TimeStampedMixin):
    """A task every machine of ``machine_type`` should carry.

    The ``task`` text acts as the natural key within a machine type: the
    reconciler matches existing tasks to templates by text.
    """

    task = models.CharField(max_length=255)
    priority = models.CharField(max_length=10, choices=Priority.choices)
    frequency = models.CharField(max_length=10, choices=Frequency.choices)
    machine_type = models.CharField(max_length=100, db_index=True)
    description = models.TextField(blank=True)

    objects = MaintenanceTaskTemplateQuerySet.as_manager()
    history = HistoricalRecords()

    class Meta:
        ordering = ["machine_type", "frequency", "task"]

    def __str__(self) -> str:
        return f"{self.machine_type}: {self.task}"


class MaintenanceTaskQuerySet(PriorityOrderingMixin, models.QuerySet):
    def linked_to(self, template: MaintenanceTaskTemplate):
        return self.filter(task_template=template)


class MaintenanceTask(TimeStampedMixin):
    """A task on one machine, either generated from a template or added by hand."""

    machine = models.ForeignKey(
        Machine, on_delete=models.CASCADE, related_name="maintenance_tasks"
    )
    task = models.CharField(max_length=255)
    priority = models.CharField(max_length=10, choices=Priority.choices)
    frequency = models.CharField(
        max_length=10, choices=Frequency.choices, default=Frequency.DAILY
    )
    completed = models.BooleanField(default=False, db_index=True)
    completed_by = models.CharField(max_length=200, blank=True)
    completed_date = models.DateTimeField(null=True, blank=True)
    task_template = models.ForeignKey(
        MaintenanceTaskTemplate,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tasks",
        help_text="Template that generated this task; empty for manually added tasks",
    )

    objects = MaintenanceTaskQuerySet.as_manager()

    class Meta:
        ordering = ["completed", "task"]

    def __str__(self) -> str:
        return f"{self.machine.name} – {self.task}"

    @classmethod
    def from_template(cls, template: MaintenanceTaskTemplate, machine: Machine):
        """Build (unsaved) the task ``template`` produces on ``machine``."""
        return cls(
            machine=machine,
            task_template=template,
            completed=False,
            **{field: getattr(template, field) for field in TEMPLATE_FIELDS},
        )

    def copy_template_fields(self, template: MaintenanceTaskTemplate) -> list[str]:
        """Copy the template's fields onto this task; return the names that changed."""
        changed = []
        for field in TEMPLATE_FIELDS:
            value = getattr(template, field)
            if getattr(self, field) != value:
                setattr(self, field, value)
                changed.append(field)
        return changed
