"""Catalog models for sites and the machines installed at them."""

from __future__ import annotations

from datetime import timedelta

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords

from upkeep.apps.core.models import TimeStampedMixin

DEFAULT_MACHINE_TYPE = "general"
MAINTENANCE_INTERVAL_DAYS = 30


def default_next_maintenance_date():
    return timezone.now() + timedelta(days=MAINTENANCE_INTERVAL_DAYS)


class Site(TimeStampedMixin):
    """A plant, yard or building where machines are installed."""

    name = models.CharField(max_length=200, help_text="Display name for this site")
    location = models.CharField(max_length=200, help_text="Address or area of the site")

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class MachineQuerySet(models.QuerySet):
    """Custom queryset for Machine with common filters."""

    def of_type(self, machine_type: str):
        """Return machines tagged with exactly ``machine_type``."""
        return self.filter(machine_type=machine_type)

    def machine_types(self) -> list[str]:
        """Return the distinct, non-blank machine types in use, sorted."""
        types = (
            self.exclude(machine_type="")
            .order_by("machine_type")
            .values_list("machine_type", flat=True)
            .distinct()
        )
        return [t for t in types if t.strip()]


class Machine(TimeStampedMixin):
    """A physical machine at a site."""

    class Status(models.TextChoices):
        """Current working condition of a machine."""

        OPERATIONAL = "operational", "Operational"
        UNDER_MAINTENANCE = "under-maintenance", "Under Maintenance"
        IDLE = "idle", "Idle"

    name = models.CharField(max_length=200)
    site = models.ForeignKey(Site, on_delete=models.PROTECT, related_name="machines")
    machine_type = models.CharField(
        max_length=100,
        default=DEFAULT_MACHINE_TYPE,
        db_index=True,
        help_text="Free-text type; task templates apply to every machine of the same type",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.OPERATIONAL,
        db_index=True,
    )
    desired_daily_hours = models.PositiveIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(24)],
        help_text="Hours per day the machine is expected to run",
    )
    total_hours_run = models.PositiveIntegerField(default=0)
    last_maintenance_date = models.DateTimeField(default=timezone.now)
    next_maintenance_date = models.DateTimeField(default=default_next_maintenance_date)

    objects = MachineQuerySet.as_manager()
    history = HistoricalRecords()

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
