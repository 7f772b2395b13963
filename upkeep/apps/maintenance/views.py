"""JSON endpoints for operation logs, maintenance tasks and task templates."""

from __future__ import annotations

import logging
from datetime import datetime, time

from django.db import transaction
from django.db.models import F
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from upkeep.apps.accounts.audit import record_audit_log
from upkeep.apps.catalog.models import Machine
from upkeep.apps.core.api import (
    ApiError,
    JsonApiView,
    form_error_response,
    json_error,
    parse_json_body,
)
from upkeep.apps.core.mixins import ADMIN_ONLY

from . import sync
from .forms import (
    MaintenanceTaskCompletionForm,
    MaintenanceTaskForm,
    MaintenanceTaskTemplateForm,
    OperationLogForm,
)
from .models import MaintenanceTask, MaintenanceTaskTemplate, OperationLog

logger = logging.getLogger(__name__)


def serialize_operation_log(log: OperationLog) -> dict:
    return {
        "id": log.pk,
        "machineId": log.machine_id,
        "machineName": log.machine.name,
        "date": log.date,
        "startTime": log.start_time,
        "endTime": log.end_time,
        "totalHours": log.total_hours,
        "engineer": log.engineer,
        "operator": log.operator,
        "notOperatedReason": log.not_operated_reason or None,
        "maintenanceChecklistCompleted": log.maintenance_checklist_completed,
        "createdAt": log.created_at,
    }


def serialize_task(task: MaintenanceTask) -> dict:
    return {
        "id": task.pk,
        "machineId": task.machine_id,
        "task": task.task,
        "priority": task.priority,
        "frequency": task.frequency,
        "completed": task.completed,
        "completedBy": task.completed_by or None,
        "completedDate": task.completed_date,
        "taskTemplateId": task.task_template_id,
        "createdAt": task.created_at,
        "updatedAt": task.updated_at,
    }


def serialize_template(template: MaintenanceTaskTemplate) -> dict:
    return {
        "id": template.pk,
        "task": template.task,
        "priority": template.priority,
        "frequency": template.frequency,
        "machineType": template.machine_type,
        "description": template.description,
        "createdAt": template.created_at,
        "updatedAt": template.updated_at,
    }


def _with_machine(payload: dict) -> dict:
    """Accept ``machineId`` on the wire for the form's ``machine`` field."""
    data = dict(payload)
    if "machine_id" in data and "machine" not in data:
        data["machine"] = data.pop("machine_id")
    return data


def _parse_boundary(value: str, *, end: bool = False):
    """Parse a date filter; a bare date covers the whole day."""
    parsed = parse_datetime(value)
    if parsed is not None:
        return parsed if timezone.is_aware(parsed) else timezone.make_aware(parsed)
    day = parse_date(value)
    if day is None:
        raise ApiError(f"Invalid date: {value}")
    return timezone.make_aware(datetime.combine(day, time.max if end else time.min))


def _id_param(request, name: str) -> str | None:
    value = request.GET.get(name)
    if value and not value.isdigit():
        raise ApiError(f"Invalid {name}: {value}")
    return value


def _machine_filter(queryset, request):
    machine_id = _id_param(request, "machineId")
    site_id = _id_param(request, "siteId")
    if machine_id:
        return queryset.filter(machine_id=machine_id)
    if site_id:
        return queryset.filter(machine__site_id=site_id)
    return queryset


class OperationLogListView(JsonApiView):
    def get(self, request, *args, **kwargs):
        logs = _machine_filter(OperationLog.objects.select_related("machine"), request)
        start_date = request.GET.get("startDate")
        end_date = request.GET.get("endDate")
        if start_date and end_date:
            logs = logs.filter(
                date__gte=_parse_boundary(start_date),
                date__lte=_parse_boundary(end_date, end=True),
            )
        return JsonResponse([serialize_operation_log(log) for log in logs], safe=False)

    def post(self, request, *args, **kwargs):
        form = OperationLogForm(_with_machine(parse_json_body(request)))
        if not form.is_valid():
            return form_error_response(form)
        with transaction.atomic():
            log = form.save()
            Machine.objects.filter(pk=log.machine_id).update(
                total_hours_run=F("total_hours_run") + log.total_hours
            )
        record_audit_log(
            request,
            "CREATE_OPERATION_LOG",
            "OperationLog",
            log.pk,
            {
                "machineName": log.machine.name,
                "totalHours": log.total_hours,
                "engineer": log.engineer,
            },
        )
        return JsonResponse(serialize_operation_log(log), status=201)


class MaintenanceTaskListView(JsonApiView):
    admin_methods = frozenset({"POST"})

    def get(self, request, *args, **kwargs):
        tasks = _machine_filter(MaintenanceTask.objects.all(), request)
        completed = request.GET.get("completed")
        if completed in ("true", "false"):
            tasks = tasks.filter(completed=completed == "true")
        tasks = tasks.by_priority("task")
        return JsonResponse([serialize_task(t) for t in tasks], safe=False)

    def post(self, request, *args, **kwargs):
        form = MaintenanceTaskForm(_with_machine(parse_json_body(request)))
        if not form.is_valid():
            return form_error_response(form)
        task = form.save()
        record_audit_log(
            request,
            "CREATE_MAINTENANCE_TASK",
            "MaintenanceTask",
            task.pk,
            {"task": task.task, "machineName": task.machine.name},
        )
        return JsonResponse(serialize_task(task), status=201)


class MaintenanceTaskDetailView(JsonApiView):
    """Engineers complete tasks; only admins delete them."""

    admin_methods = frozenset({"DELETE"})
    not_found_message = "Task not found"

    def put(self, request, pk, *args, **kwargs):
        task = get_object_or_404(MaintenanceTask.objects.select_related("machine"), pk=pk)
        form = MaintenanceTaskCompletionForm(parse_json_body(request))
        if not form.is_valid():
            return form_error_response(form)

        completed = form.cleaned_data["completed"]
        if completed:
            user = request.user
            task.completed_by = (
                form.cleaned_data["completed_by"]
                or user.get_full_name()
                or user.get_username()
            )
            task.completed_date = timezone.now()
        else:
            task.completed_by = ""
            task.completed_date = None
        task.completed = completed
        task.save(update_fields=["completed", "completed_by", "completed_date", "updated_at"])

        record_audit_log(
            request,
            "UPDATE_MAINTENANCE_TASK",
            "MaintenanceTask",
            task.pk,
            {
                "task": task.task,
                "machineName": task.machine.name,
                "completed": task.completed,
                "completedBy": task.completed_by or None,
            },
        )
        return JsonResponse(serialize_task(task))

    def delete(self, request, pk, *args, **kwargs):
        task = get_object_or_404(MaintenanceTask.objects.select_related("machine"), pk=pk)
        details = {"task": task.task, "machineName": task.machine.name}
        task_id = task.pk
        task.delete()
        record_audit_log(request, "DELETE_MAINTENANCE_TASK", "MaintenanceTask", task_id, details)
        return JsonResponse({"message": "Task deleted successfully"})


class TaskTemplateListView(JsonApiView):
    admin_methods = frozenset({"POST"})

    def get(self, request, *args, **kwargs):
        templates = MaintenanceTaskTemplate.objects.all()
        machine_type = request.GET.get("machineType")
        if machine_type:
            templates = templates.for_machine_type(machine_type)
        frequency = request.GET.get("frequency")
        if frequency:
            templates = templates.filter(frequency=frequency)
        templates = templates.by_priority("task")
        return JsonResponse([serialize_template(t) for t in templates], safe=False)

    def post(self, request, *args, **kwargs):
        form = MaintenanceTaskTemplateForm(parse_json_body(request))
        if not form.is_valid():
            return form_error_response(form)
        template = form.save()
        result = sync.synchronize_machine_type(template.machine_type)
        record_audit_log(
            request,
            "CREATE_MAINTENANCE_TASK_TEMPLATE",
            "MaintenanceTaskTemplate",
            template.pk,
            {
                "task": template.task,
                "machineType": template.machine_type,
                "frequency": template.frequency,
                **result.as_dict(),
            },
        )
        return JsonResponse(serialize_template(template), status=201)


class TaskTemplateDetailView(JsonApiView):
    admin_methods = ADMIN_ONLY
    not_found_message = "Template not found"

    def get(self, request, pk, *args, **kwargs):
        template = get_object_or_404(MaintenanceTaskTemplate, pk=pk)
        return JsonResponse(serialize_template(template))

    def put(self, request, pk, *args, **kwargs):
        template = get_object_or_404(MaintenanceTaskTemplate, pk=pk)
        previous_machine_type = template.machine_type
        form = MaintenanceTaskTemplateForm(parse_json_body(request), instance=template)
        if not form.is_valid():
            return form_error_response(form)
        template = form.save()
        result = sync.update_template(template, previous_machine_type)
        record_audit_log(
            request,
            "UPDATE_MAINTENANCE_TASK_TEMPLATE",
            "MaintenanceTaskTemplate",
            template.pk,
            {
                "task": template.task,
                "machineType": template.machine_type,
                "previousMachineType": previous_machine_type,
                **result.as_dict(),
            },
        )
        return JsonResponse(
            {**serialize_template(template), "synchronization": result.as_dict()}
        )

    def delete(self, request, pk, *args, **kwargs):
        template = get_object_or_404(MaintenanceTaskTemplate, pk=pk)
        details = {"task": template.task, "machineType": template.machine_type}
        template_id = template.pk
        tasks_deleted = sync.delete_template(template)
        record_audit_log(
            request,
            "DELETE_MAINTENANCE_TASK_TEMPLATE",
            "MaintenanceTaskTemplate",
            template_id,
            {**details, "tasksDeleted": tasks_deleted},
        )
        return JsonResponse(
            {
                "message": "Maintenance task template deleted successfully",
                "tasksDeleted": tasks_deleted,
            }
        )


class ApplyTaskTemplatesView(JsonApiView):
    admin_methods = ADMIN_ONLY
    not_found_message = "Machine not found"

    def post(self, request, pk, *args, **kwargs):
        machine = get_object_or_404(Machine, pk=pk)
        try:
            tasks = sync.apply_templates_to_machine(machine)
        except sync.NoTemplatesError:
            return json_error("No task templates found for this machine type", status=404)
        except sync.TasksAlreadyExistError:
            return json_error(
                "Tasks already exist for this machine. Delete existing tasks first.", status=409
            )

        record_audit_log(
            request,
            "APPLY_TASK_TEMPLATES",
            "Machine",
            machine.pk,
            {
                "machineName": machine.name,
                "machineType": machine.machine_type,
                "tasksCreated": len(tasks),
            },
        )
        return JsonResponse(
            {
                "message": f"Applied {len(tasks)} task templates to machine",
                "tasks": [serialize_task(t) for t in tasks],
            },
            status=201,
        )


class SynchronizeMachineTypeView(JsonApiView):
    admin_methods = ADMIN_ONLY

    def post(self, request, machine_type, *args, **kwargs):
        try:
            result = sync.synchronize_machine_type(machine_type)
        except Exception:
            logger.exception("machine_type_sync_failed", extra={"machine_type": machine_type})
            return json_error("Failed to synchronize machine type", status=500)

        record_audit_log(
            request,
            "SYNCHRONIZE_MACHINE_TYPE",
            "MaintenanceTask",
            details={"machineType": machine_type, **result.as_dict()},
        )
        return JsonResponse(
            {
                "message": (
                    f"Synchronized {result.machines_synchronized} machines "
                    f"of type {machine_type}"
                ),
                **result.as_dict(),
            }
        )
