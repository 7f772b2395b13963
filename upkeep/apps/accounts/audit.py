"""Audit log sink."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from upkeep.apps.core.ip import get_real_ip

from .models import AuditLog

if TYPE_CHECKING:
    from django.http import HttpRequest

logger = logging.getLogger(__name__)

USER_AGENT_MAX_LENGTH = 512


def record_audit_log(
    request: HttpRequest | None,
    action: str,
    resource: str = "",
    resource_id: Any = None,
    details: dict[str, Any] | None = None,
    user=None,
) -> AuditLog:
    """Record who performed ``action`` on ``resource``.

    The acting user defaults to the request's authenticated user. Without a
    request (management commands, queued jobs) the entry has no IP or user
    agent.
    """
    ip_address = None
    user_agent = ""
    if request is not None:
        if user is None and request.user.is_authenticated:
            user = request.user
        ip_address = get_real_ip(request)
        user_agent = request.META.get("HTTP_USER_AGENT", "")[:USER_AGENT_MAX_LENGTH]

    entry = AuditLog.objects.create(
        user=user,
        action=action,
        resource=resource,
        resource_id="" if resource_id is None else str(resource_id),
        details=details,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    logger.info(
        "audit_log_recorded",
        extra={
            "action": action,
            "resource": resource,
            "resource_id": entry.resource_id,
        },
    )
    return entry
