"""Signals for the maintenance app.

Re-synchronizes a machine's tasks when the machine changes type.
"""

from functools import partial

from django.db import transaction
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from upkeep.apps.catalog.models import Machine

from .tasks import enqueue_machine_type_sync


@receiver(pre_save, sender=Machine)
def capture_original_machine_type(sender, instance, **kwargs):
    """Capture the stored machine type before save for change detection."""
    instance._original_machine_type = None
    if instance.pk:
        instance._original_machine_type = (
            Machine.objects.filter(pk=instance.pk).values_list("machine_type", flat=True).first()
        )


@receiver(post_save, sender=Machine)
def machine_type_changed(sender, instance, created, **kwargs):
    """Queue a sync of the new type once the machine's type change commits.

    New machines are left alone: templates are applied to them explicitly.
    """
    if created:
        return
    original = getattr(instance, "_original_machine_type", None)
    if original is None or original == instance.machine_type:
        return
    transaction.on_commit(partial(enqueue_machine_type_sync, instance.machine_type))
