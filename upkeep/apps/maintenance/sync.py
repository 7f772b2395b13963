"""Keep every machine's maintenance tasks in line with its type's templates.

A machine of type T should carry exactly one task per template tagged T,
matched by task text rather than by template id. Reconciling one machine:

1. delete tasks whose text matches no template (hand-added ones included),
2. create a linked task for every template whose text is missing,
3. re-copy text, priority and frequency onto the surviving linked tasks
   from their template, when that template is one of T's,
4. link surviving hand-added tasks to the template with the same text,
   unless that template already has a linked task on the machine.

Machines are reconciled one after another, each inside its own transaction.
Nothing spans machines: if machine N fails, machines before it stay
reconciled and the error propagates to the caller. There is no locking, so
two concurrent runs for the same type can both add the same missing task.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, fields

from django.db import transaction

from upkeep.apps.catalog.models import Machine

from .models import MaintenanceTask, MaintenanceTaskTemplate

logger = logging.getLogger(__name__)


class TasksAlreadyExistError(Exception):
    """Templates can only be applied to a machine with no tasks."""

    def __init__(self, machine: Machine, task_count: int):
        self.machine = machine
        self.task_count = task_count
        super().__init__(f"Machine {machine.pk} already has {task_count} maintenance task(s)")


class NoTemplatesError(Exception):
    """No task template is tagged with the machine's type."""

    def __init__(self, machine_type: str):
        self.machine_type = machine_type
        super().__init__(f"No task templates found for machine type {machine_type!r}")


@dataclass
class SyncResult:
    """Counts reported by a synchronization run."""

    machines_synchronized: int = 0
    tasks_removed: int = 0
    tasks_added: int = 0
    tasks_updated: int = 0

    def __add__(self, other: SyncResult) -> SyncResult:
        return SyncResult(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )

    def as_dict(self) -> dict[str, int]:
        """Wire format for API responses and audit details."""
        return {
            "machinesSynchronized": self.machines_synchronized,
            "tasksRemoved": self.tasks_removed,
            "tasksAdded": self.tasks_added,
            "tasksUpdated": self.tasks_updated,
        }


def templates_for_machine_type(machine_type: str) -> list[MaintenanceTaskTemplate]:
    return list(MaintenanceTaskTemplate.objects.for_machine_type(machine_type).order_by("pk"))


def synchronize_machine(
    machine: Machine, templates: Iterable[MaintenanceTaskTemplate]
) -> SyncResult:
    """Reconcile one machine's tasks against ``templates``.

    ``tasks_updated`` only counts tasks whose fields or link actually
    changed, so re-running with nothing edited in between reports no work.
    """
    templates = list(templates)
    templates_by_text = {t.task: t for t in templates}
    template_texts = set(templates_by_text)
    templates_by_id = {t.pk: t for t in templates}

    with transaction.atomic():
        current = list(machine.maintenance_tasks.order_by("pk"))
        current_texts = {t.task for t in current}

        stale = [t for t in current if t.task not in template_texts]
        missing = [t for t in templates if t.task not in current_texts]
        kept = [t for t in current if t.task in template_texts]
        linked = [t for t in kept if t.task_template_id is not None]
        unlinked = [t for t in kept if t.task_template_id is None]

        removed = 0
        if stale:
            removed, _ = MaintenanceTask.objects.filter(pk__in=[t.pk for t in stale]).delete()

        if missing:
            MaintenanceTask.objects.bulk_create(
                [MaintenanceTask.from_template(template, machine) for template in missing]
            )

        updated = 0
        for task in linked:
            template = templates_by_id.get(task.task_template_id)
            if template is None:
                # Linked to a template of another type (e.g. the template moved)
                continue
            changed = task.copy_template_fields(template)
            if changed:
                task.save(update_fields=[*changed, "updated_at"])
                updated += 1

        # One linked task per template; extra copies stay unlinked
        claimed = {t.task_template_id for t in linked}
        for task in unlinked:
            template = templates_by_text[task.task]
            if template.pk in claimed:
                continue
            claimed.add(template.pk)
            task.task_template = template
            changed = ["task_template", *task.copy_template_fields(template)]
            task.save(update_fields=[*changed, "updated_at"])
            updated += 1

    return SyncResult(
        machines_synchronized=1,
        tasks_removed=removed,
        tasks_added=len(missing),
        tasks_updated=updated,
    )


def synchronize_machine_type(machine_type: str) -> SyncResult:
    """Reconcile every machine of ``machine_type`` against the type's templates.

    A type with no templates, or with no machines, is left alone and reports
    zero counts.
    """
    templates = templates_for_machine_type(machine_type)
    if not templates:
        logger.info("machine_type_sync_skipped", extra={"machine_type": machine_type})
        return SyncResult()

    total = SyncResult()
    for machine in Machine.objects.of_type(machine_type).order_by("pk"):
        total += synchronize_machine(machine, templates)

    logger.info(
        "machine_type_synchronized",
        extra={"machine_type": machine_type, **asdict(total)},
    )
    return total


def remove_template_tasks(template: MaintenanceTaskTemplate, machine_type: str) -> int:
    """Delete tasks generated by ``template`` on machines of ``machine_type``."""
    deleted, _ = (
        MaintenanceTask.objects.linked_to(template)
        .filter(machine__machine_type=machine_type)
        .delete()
    )
    return deleted


def update_template(template: MaintenanceTaskTemplate, previous_machine_type: str) -> SyncResult:
    """Propagate an edit of an already-saved template to machine tasks.

    When the template moved to another machine type, its tasks are first
    removed from machines of the type it left; those removals are included in
    ``tasks_removed``. The template's current type is then synchronized,
    which adds the fresh tasks there and pushes text, priority and frequency
    edits onto existing linked tasks.
    """
    moved = 0
    if previous_machine_type != template.machine_type:
        moved = remove_template_tasks(template, previous_machine_type)
        logger.info(
            "template_machine_type_changed",
            extra={
                "template_id": template.pk,
                "from_machine_type": previous_machine_type,
                "to_machine_type": template.machine_type,
                "tasks_removed": moved,
            },
        )

    result = synchronize_machine_type(template.machine_type)
    result.tasks_removed += moved
    return result


def delete_template(template: MaintenanceTaskTemplate) -> int:
    """Delete ``template`` and every task it generated; return the task count."""
    template_id = template.pk
    with transaction.atomic():
        deleted, _ = MaintenanceTask.objects.linked_to(template).delete()
        template.delete()

    logger.info(
        "template_deleted",
        extra={"template_id": template_id, "tasks_deleted": deleted},
    )
    return deleted


def apply_templates_to_machine(machine: Machine) -> list[MaintenanceTask]:
    """Create one linked task per template of the machine's type.

    Raises:
        NoTemplatesError: no template is tagged with the machine's type.
        TasksAlreadyExistError: the machine already has tasks; they must be
            cleared by hand first.
    """
    templates = templates_for_machine_type(machine.machine_type)
    if not templates:
        raise NoTemplatesError(machine.machine_type)

    existing = machine.maintenance_tasks.count()
    if existing:
        raise TasksAlreadyExistError(machine, existing)

    created = []
    with transaction.atomic():
        for template in templates:
            task = MaintenanceTask.from_template(template, machine)
            task.save()
            created.append(task)

    logger.info(
        "templates_applied",
        extra={
            "machine_id": machine.pk,
            "machine_type": machine.machine_type,
            "tasks_added": len(created),
        },
    )
    return created
