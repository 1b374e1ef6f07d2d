"""Caller identity as forwarded by the API gateway."""

from uuid import UUID

from rest_framework.exceptions import NotAuthenticated
from rest_framework.request import Request

from core.domain.value_objects import parse_id

USER_HEADER = "X-User-ID"


def require_user_id(request: Request) -> UUID:
    """Return the caller's user id or raise NotAuthenticated."""
    raw = request.headers.get(USER_HEADER)
    if not raw:
        raise NotAuthenticated("User ID required")
    return parse_id(raw, "user ID")
