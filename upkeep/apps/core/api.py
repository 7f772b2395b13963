"""JSON API plumbing shared by every app.

The dashboard talks camelCase JSON; models and forms use snake_case. Request
bodies are normalized with :func:`parse_json_body` before they reach a form,
and responses are built by per-app ``serialize_*`` helpers that emit
camelCase keys directly.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from django.http import Http404, HttpRequest, JsonResponse
from django.views.generic import View

from upkeep.apps.core.mixins import AdminMethodsMixin, ApiLoginRequiredMixin

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


class ApiError(Exception):
    """An error that maps directly onto a JSON error response."""

    def __init__(self, message: str, status: int = 400, errors: dict | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors


def to_snake_case(key: str) -> str:
    """Convert ``machineType`` to ``machine_type``. Snake-case keys pass through."""
    return _CAMEL_BOUNDARY_RE.sub("_", key).lower()


def parse_json_body(request: HttpRequest) -> dict[str, Any]:
    """Decode a JSON object body and snake_case its top-level keys.

    An empty body decodes to ``{}``. Anything other than a JSON object is a 400.
    """
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ApiError("Request body must be valid JSON") from exc
    if not isinstance(payload, dict):
        raise ApiError("Request body must be a JSON object")
    return {to_snake_case(key): value for key, value in payload.items()}


def json_error(message: str, status: int = 400, **extra: Any) -> JsonResponse:
    return JsonResponse({"error": message, **extra}, status=status)


def form_error_response(form) -> JsonResponse:
    """Report a bound, invalid form as a 400.

    ``error`` carries the first message for display; ``errors`` carries the
    full field map for clients that highlight individual inputs.
    """
    errors = {field: [str(e) for e in field_errors] for field, field_errors in form.errors.items()}
    first_field, first_errors = next(iter(errors.items()))
    message = first_errors[0]
    if first_field != "__all__":
        message = f"{first_field}: {message}"
    return json_error(message, status=400, errors=errors)


class JsonApiView(ApiLoginRequiredMixin, AdminMethodsMixin, View):
    """Base class for JSON endpoints.

    Handles authentication (401), role checks (403), missing objects (404),
    :class:`ApiError` and unsupported methods, all as ``{"error": ...}``
    bodies. Subclasses set ``not_found_message`` for their 404 text.
    """

    not_found_message = "Not found"

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except Http404:
            return json_error(self.not_found_message, status=404)
        except ApiError as exc:
            extra = {"errors": exc.errors} if exc.errors else {}
            return json_error(exc.message, status=exc.status, **extra)

    def http_method_not_allowed(self, request, *args, **kwargs):
        logger.warning("api_method_not_allowed", extra={"allowed": self._allowed_methods()})
        response = json_error("Method not allowed", status=405)
        response["Allow"] = ", ".join(self._allowed_methods())
        return response
