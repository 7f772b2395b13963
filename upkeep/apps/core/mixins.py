"""Reusable view mixins for the JSON API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from django.http import JsonResponse

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser
    from django.http import HttpRequest


def is_admin(user: AbstractUser | Any) -> bool:
    """
    Check if user has the admin role.

    Admins manage sites, machines, tasks and task templates. Every other
    active, authenticated user is an engineer who can read everything, record
    operation logs and complete tasks.
    """
    return bool(user.is_authenticated and (user.is_staff or user.is_superuser))


class ApiLoginRequiredMixin:
    """
    Mixin requiring an authenticated session.

    Unlike django.contrib.auth's LoginRequiredMixin this never redirects:
    anonymous callers get a JSON 401 the dashboard can act on.
    """

    allow_anonymous = False

    def dispatch(self, request: HttpRequest, *args, **kwargs):
        if not self.allow_anonymous and not request.user.is_authenticated:
            return JsonResponse({"error": "Authentication required"}, status=401)
        return super().dispatch(request, *args, **kwargs)  # type: ignore[misc]


class AdminMethodsMixin:
    """
    Mixin restricting some HTTP methods to admins.

    Set ``admin_methods`` to the upper-case method names that need the admin
    role, e.g. ``{"POST"}`` for a list endpoint anyone may read. Use
    ``ADMIN_ONLY`` to protect every method.

    Authenticated but unauthorized -> 403
    """

    admin_methods: frozenset[str] = frozenset()

    def dispatch(self, request: HttpRequest, *args, **kwargs):
        method = (request.method or "").upper()
        if method in self.admin_methods and not is_admin(request.user):
            return JsonResponse({"error": "Admin role required"}, status=403)
        return super().dispatch(request, *args, **kwargs)  # type: ignore[misc]


ADMIN_ONLY = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"})
