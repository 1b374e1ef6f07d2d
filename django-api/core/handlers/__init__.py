from core.handlers.exceptions import domain_exception_handler
from core.handlers.identity import require_user_id
from core.handlers.permissions import HasInternalToken

__all__ = ["HasInternalToken", "domain_exception_handler", "require_user_id"]
