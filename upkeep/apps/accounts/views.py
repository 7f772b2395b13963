"""Session authentication and audit log endpoints."""

from __future__ import annotations

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.http import JsonResponse
from django.middleware.csrf import get_token

from upkeep.apps.core.api import ApiError, JsonApiView, json_error, parse_json_body
from upkeep.apps.core.mixins import ADMIN_ONLY, is_admin

from .audit import record_audit_log
from .models import AuditLog

MAX_AUDIT_LOG_LIMIT = 500


def serialize_user(user) -> dict:
    return {
        "id": user.pk,
        "name": user.get_full_name() or user.get_username(),
        "email": user.email,
        "role": "admin" if is_admin(user) else "engineer",
    }


def serialize_audit_log(entry: AuditLog) -> dict:
    return {
        "id": entry.pk,
        "action": entry.action,
        "resource": entry.resource,
        "resourceId": entry.resource_id or None,
        "details": entry.details,
        "ipAddress": entry.ip_address,
        "userAgent": entry.user_agent,
        "createdAt": entry.created_at,
        "user": serialize_user(entry.user) if entry.user else None,
    }


def _username_for_login(payload: dict) -> str | None:
    """Resolve the username to authenticate, accepting either username or email."""
    username = (payload.get("username") or "").strip()
    if username:
        return username
    email = (payload.get("email") or "").strip()
    if not email:
        return None
    user = get_user_model().objects.filter(email__iexact=email).first()
    return user.get_username() if user else None


class LoginView(JsonApiView):
    """Start a session from email (or username) and password."""

    allow_anonymous = True

    def get(self, request, *args, **kwargs):
        """Hand out the CSRF token the dashboard must echo on every write."""
        return JsonResponse({"csrfToken": get_token(request)})

    def post(self, request, *args, **kwargs):
        payload = parse_json_body(request)
        password = payload.get("password") or ""
        username = _username_for_login(payload)
        if not password or not (payload.get("username") or payload.get("email")):
            raise ApiError("Email and password are required")

        user = authenticate(request, username=username, password=password) if username else None
        if user is None:
            return json_error("Invalid credentials", status=401)

        login(request, user)
        record_audit_log(request, "LOGIN", "User", user.pk, {"method": "password"}, user=user)
        return JsonResponse({"user": serialize_user(user)})


class LogoutView(JsonApiView):
    def post(self, request, *args, **kwargs):
        user = request.user
        record_audit_log(request, "LOGOUT", "User", user.pk)
        logout(request)
        return JsonResponse({"message": "Logged out successfully"})


class ProfileView(JsonApiView):
    def get(self, request, *args, **kwargs):
        return JsonResponse({"user": serialize_user(request.user)})


class AuditLogListView(JsonApiView):
    """Most recent audit entries, newest first (admin only)."""

    admin_methods = ADMIN_ONLY

    def get(self, request, *args, **kwargs):
        entries = AuditLog.objects.select_related("user")
        action = request.GET.get("action")
        if action:
            entries = entries.filter(action=action)
        resource = request.GET.get("resource")
        if resource:
            entries = entries.filter(resource=resource)
        user_id = request.GET.get("userId")
        if user_id and not user_id.isdigit():
            raise ApiError("userId must be an integer")
        if user_id:
            entries = entries.filter(user_id=user_id)

        try:
            limit = int(request.GET.get("limit", settings.AUDIT_LOG_DEFAULT_LIMIT))
        except ValueError as exc:
            raise ApiError("limit must be an integer") from exc
        limit = max(1, min(limit, MAX_AUDIT_LOG_LIMIT))

        return JsonResponse([serialize_audit_log(e) for e in entries[:limit]], safe=False)
