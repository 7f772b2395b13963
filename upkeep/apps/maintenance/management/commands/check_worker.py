"""Check django-q2 worker health and queue status."""

from __future__ import annotations

from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone
from django_q.models import Failure, OrmQ, Success

STUCK_AFTER_SECONDS = 600


class Command(BaseCommand):
    help = "Check django-q2 worker health and queue status"

    def handle(self, *args, **options):
        since = timezone.now() - timedelta(hours=24)
        self._recent_success(since)
        self._recent_failures(since)
        self._queue_status()

    def _recent_success(self, since):
        count = Success.objects.filter(stopped__gte=since).count()
        self.stdout.write(f"Recent successful tasks (24h): {count}")

    def _recent_failures(self, since):
        failures = Failure.objects.filter(stopped__gte=since)
        count = failures.count()
        if not count:
            self.stdout.write(self.style.SUCCESS("No recent failures"))
            return
        self.stdout.write(self.style.WARNING(f"Recent failed tasks (24h): {count}"))
        latest = failures.order_by("-stopped").first()
        self.stdout.write(f"Latest failure: {latest.func} {latest.args}")
        self.stdout.write(f"Error: {latest.result}")

    def _queue_status(self):
        queued = OrmQ.objects.count()
        if not queued:
            self.stdout.write(self.style.SUCCESS("Queue is empty"))
            return
        self.stdout.write(f"Tasks in queue: {queued}")
        oldest = OrmQ.objects.order_by("lock").first()
        if oldest and oldest.lock:
            age = (timezone.now() - oldest.lock).total_seconds()
            if age > STUCK_AFTER_SECONDS:
                self.stdout.write(
                    self.style.ERROR(
                        f"Oldest queued task is {age / 60:.1f} minutes old; worker may be stuck"
                    )
                )
            else:
                self.stdout.write(f"Oldest queued task: {age:.0f}s old")
