"""Forms validating JSON payloads for maintenance endpoints."""

from __future__ import annotations

from django import forms

from upkeep.apps.catalog.models import Machine

from .models import Frequency, MaintenanceTask, MaintenanceTaskTemplate, OperationLog


class MachineChoiceField(forms.ModelChoiceField):
    def __init__(self, **kwargs):
        kwargs.setdefault("queryset", Machine.objects.all())
        kwargs.setdefault("error_messages", {"invalid_choice": "Invalid machine ID"})
        super().__init__(**kwargs)


class OperationLogForm(forms.ModelForm):
    machine = MachineChoiceField()

    class Meta:
        model = OperationLog
        fields = [
            "machine",
            "date",
            "start_time",
            "end_time",
            "total_hours",
            "engineer",
            "operator",
            "not_operated_reason",
            "maintenance_checklist_completed",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["total_hours"].required = False

    def clean_total_hours(self):
        return self.cleaned_data.get("total_hours") or 0


class MaintenanceTaskForm(forms.ModelForm):
    """Create a task by hand. Such tasks carry no template link."""

    machine = MachineChoiceField()

    class Meta:
        model = MaintenanceTask
        fields = ["machine", "task", "priority", "frequency"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["frequency"].required = False

    def clean_task(self):
        return self.cleaned_data["task"].strip()

    def clean_frequency(self):
        return self.cleaned_data.get("frequency") or Frequency.DAILY


class MaintenanceTaskCompletionForm(forms.Form):
    completed = forms.BooleanField(required=False)
    completed_by = forms.CharField(max_length=200, required=False)


class MaintenanceTaskTemplateForm(forms.ModelForm):
    class Meta:
        model = MaintenanceTaskTemplate
        fields = ["task", "priority", "frequency", "machine_type", "description"]

    def clean_task(self):
        return self.cleaned_data["task"].strip()

    def clean_machine_type(self):
        return self.cleaned_data["machine_type"].strip()

    def clean(self):
        cleaned = super().clean()
        task = cleaned.get("task")
        machine_type = cleaned.get("machine_type")
        if task and machine_type:
            duplicates = MaintenanceTaskTemplate.objects.for_machine_type(machine_type).filter(
                task=task
            )
            if self.instance.pk:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                self.add_error(
                    "task", "A template with this task already exists for this machine type."
                )
        return cleaned
