"""Health check helpers."""

from __future__ import annotations

from django.db import connection

from upkeep.apps.catalog.models import Machine


def check_db_and_orm() -> dict:
    """Verify DB connectivity and ORM access by touching the machines table."""
    details: dict[str, object] = {}
    connection.ensure_connection()
    details["db"] = "ok"

    machine_exists = Machine.objects.order_by("id").values_list("id", flat=True).first()
    details["orm_machine_sample"] = machine_exists if machine_exists is not None else "none"
    return details
