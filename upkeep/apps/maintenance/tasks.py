"""Background maintenance jobs using Django Q."""

from __future__ import annotations

import logging

from django_q.tasks import async_task

from upkeep.logging import bind_log_context, current_log_context, reset_log_context

logger = logging.getLogger(__name__)


def enqueue_machine_type_sync(machine_type: str, *, async_runner=async_task) -> None:
    """Queue a synchronization of ``machine_type``.

    Called from signal handlers after the triggering transaction commits.
    Skipped when the SYNC_ON_MACHINE_TYPE_CHANGE flag is off.
    """
    from constance import config

    if not config.SYNC_ON_MACHINE_TYPE_CHANGE:
        return

    async_runner(
        synchronize_machine_type_job,
        machine_type,
        current_log_context(),
        timeout=300,
    )


def synchronize_machine_type_job(machine_type: str, log_context: dict | None = None) -> dict:
    """Run the reconciler for one machine type. Runs in the Django Q worker."""
    from upkeep.apps.accounts.audit import record_audit_log

    from .sync import synchronize_machine_type

    token = bind_log_context(**log_context) if log_context else None
    try:
        result = synchronize_machine_type(machine_type)
        record_audit_log(
            None,
            "SYNCHRONIZE_MACHINE_TYPE",
            "MaintenanceTask",
            details={"machineType": machine_type, "trigger": "machine_type_changed", **result.as_dict()},
        )
        return result.as_dict()
    finally:
        if token is not None:
            reset_log_context(token)
