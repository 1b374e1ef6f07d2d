from access.domain.models import AccessGrant, AccessStatus

__all__ = ["AccessGrant", "AccessStatus"]
