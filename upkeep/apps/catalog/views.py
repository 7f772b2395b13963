"""JSON endpoints for sites, machines and machine types."""

from __future__ import annotations

from django.db.models import Count
from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from upkeep.apps.accounts.audit import record_audit_log
from upkeep.apps.core.api import (
    JsonApiView,
    form_error_response,
    json_error,
    parse_json_body,
)

from .forms import MachineForm, SiteForm
from .models import Machine, Site


def serialize_site(site: Site) -> dict:
    machine_count = getattr(site, "machine_count", None)
    if machine_count is None:
        machine_count = site.machines.count()
    return {
        "id": site.pk,
        "name": site.name,
        "location": site.location,
        "machineCount": machine_count,
    }


def serialize_machine(machine: Machine) -> dict:
    return {
        "id": machine.pk,
        "name": machine.name,
        "siteId": machine.site_id,
        "siteName": machine.site.name,
        "machineType": machine.machine_type,
        "status": machine.status,
        "desiredDailyHours": machine.desired_daily_hours,
        "totalHoursRun": machine.total_hours_run,
        "lastMaintenanceDate": machine.last_maintenance_date,
        "nextMaintenanceDate": machine.next_maintenance_date,
        "createdAt": machine.created_at,
        "updatedAt": machine.updated_at,
    }


def _machine_form_data(payload: dict) -> dict:
    """Accept ``siteId`` on the wire for the form's ``site`` field."""
    data = dict(payload)
    if "site_id" in data and "site" not in data:
        data["site"] = data.pop("site_id")
    return data


class SiteListView(JsonApiView):
    admin_methods = frozenset({"POST"})

    def get(self, request, *args, **kwargs):
        sites = Site.objects.annotate(machine_count=Count("machines")).order_by("name")
        return JsonResponse([serialize_site(s) for s in sites], safe=False)

    def post(self, request, *args, **kwargs):
        form = SiteForm(parse_json_body(request))
        if not form.is_valid():
            return form_error_response(form)
        site = form.save()
        record_audit_log(
            request,
            "CREATE_SITE",
            "Site",
            site.pk,
            {"siteName": site.name, "location": site.location},
        )
        return JsonResponse(serialize_site(site), status=201)


class SiteDetailView(JsonApiView):
    admin_methods = frozenset({"PUT", "DELETE"})
    not_found_message = "Site not found"

    def get(self, request, pk, *args, **kwargs):
        site = get_object_or_404(Site, pk=pk)
        return JsonResponse(serialize_site(site))

    def put(self, request, pk, *args, **kwargs):
        site = get_object_or_404(Site, pk=pk)
        form = SiteForm(parse_json_body(request), instance=site)
        if not form.is_valid():
            return form_error_response(form)
        site = form.save()
        record_audit_log(
            request,
            "UPDATE_SITE",
            "Site",
            site.pk,
            {"siteName": site.name, "location": site.location},
        )
        return JsonResponse(serialize_site(site))

    def delete(self, request, pk, *args, **kwargs):
        site = get_object_or_404(Site, pk=pk)
        if site.machines.exists():
            return json_error(
                "Cannot delete site with machines. Please remove all machines first.",
                status=400,
            )
        details = {"siteName": site.name, "location": site.location}
        site_id = site.pk
        site.delete()
        record_audit_log(request, "DELETE_SITE", "Site", site_id, details)
        return JsonResponse({"message": "Site deleted successfully"})


class MachineListView(JsonApiView):
    admin_methods = frozenset({"POST"})

    def get(self, request, *args, **kwargs):
        machines = Machine.objects.select_related("site").order_by("name")
        site_id = request.GET.get("siteId")
        if site_id:
            machines = machines.filter(site_id=site_id)
        machine_type = request.GET.get("machineType")
        if machine_type:
            machines = machines.of_type(machine_type)
        return JsonResponse([serialize_machine(m) for m in machines], safe=False)

    def post(self, request, *args, **kwargs):
        form = MachineForm(_machine_form_data(parse_json_body(request)))
        if not form.is_valid():
            return form_error_response(form)
        machine = form.save()
        record_audit_log(
            request,
            "CREATE_MACHINE",
            "Machine",
            machine.pk,
            {
                "machineName": machine.name,
                "siteName": machine.site.name,
                "status": machine.status,
            },
        )
        return JsonResponse(serialize_machine(machine), status=201)


class MachineDetailView(JsonApiView):
    admin_methods = frozenset({"PUT", "DELETE"})
    not_found_message = "Machine not found"

    def get(self, request, pk, *args, **kwargs):
        machine = get_object_or_404(Machine.objects.select_related("site"), pk=pk)
        return JsonResponse(serialize_machine(machine))

    def put(self, request, pk, *args, **kwargs):
        machine = get_object_or_404(Machine, pk=pk)
        form = MachineForm(_machine_form_data(parse_json_body(request)), instance=machine)
        if not form.is_valid():
            return form_error_response(form)
        machine = form.save()
        record_audit_log(
            request,
            "UPDATE_MACHINE",
            "Machine",
            machine.pk,
            {
                "machineName": machine.name,
                "siteName": machine.site.name,
                "status": machine.status,
            },
        )
        return JsonResponse(serialize_machine(machine))

    def delete(self, request, pk, *args, **kwargs):
        machine = get_object_or_404(Machine.objects.select_related("site"), pk=pk)
        details = {"machineName": machine.name, "siteName": machine.site.name}
        machine_id = machine.pk
        machine.delete()
        record_audit_log(request, "DELETE_MACHINE", "Machine", machine_id, details)
        return JsonResponse({"message": "Machine deleted successfully"})


class MachineTypeListView(JsonApiView):
    def get(self, request, *args, **kwargs):
        return JsonResponse(Machine.objects.machine_types(), safe=False)
