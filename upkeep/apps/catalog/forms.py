from __future__ import annotations

from django import forms

from .models import DEFAULT_MACHINE_TYPE, Machine, Site


class SiteForm(forms.ModelForm):
    class Meta:
        model = Site
        fields = ["name", "location"]

    def clean_name(self):
        return self.cleaned_data["name"].strip()

    def clean_location(self):
        return self.cleaned_data["location"].strip()


class MachineForm(forms.ModelForm):
    """Create or update a machine.

    ``status``, ``machine_type`` and ``next_maintenance_date`` are optional:
    when left out the machine keeps its current (or default) value.
    """

    site = forms.ModelChoiceField(
        queryset=Site.objects.all(),
        error_messages={"invalid_choice": "Invalid site ID"},
    )

    class Meta:
        model = Machine
        fields = [
            "name",
            "site",
            "desired_daily_hours",
            "status",
            "machine_type",
            "next_maintenance_date",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name in ("status", "machine_type", "next_maintenance_date"):
            self.fields[name].required = False

    def clean_machine_type(self):
        machine_type = (self.cleaned_data.get("machine_type") or "").strip()
        return machine_type or self.instance.machine_type or DEFAULT_MACHINE_TYPE

    def clean_status(self):
        return self.cleaned_data.get("status") or self.instance.status

    def clean_next_maintenance_date(self):
        return self.cleaned_data.get("next_maintenance_date") or self.instance.next_maintenance_date
