"""Access control for operator endpoints called by internal services."""

import hmac

from django.conf import settings
from rest_framework.permissions import BasePermission
from rest_framework.request import Request

TOKEN_HEADER = "X-Internal-Token"


class HasInternalToken(BasePermission):
    """Allow only callers presenting the shared internal token.

    Every request is refused while COMMERCE["INTERNAL_TOKEN"] is empty.
    """

    message = "Internal token required"

    def has_permission(self, request: Request, view) -> bool:
        expected = settings.COMMERCE.get("INTERNAL_TOKEN") or ""
        supplied = request.headers.get(TOKEN_HEADER) or ""
        if not expected or not supplied:
            return False
        return hmac.compare_digest(supplied.encode(), expected.encode())
