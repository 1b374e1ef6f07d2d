from access.stores.django_store import (
    CourseAccessGrantor,
    DownloadAccessGrantor,
    EventAccessGrantor,
    default_grantors,
)
from access.stores.interfaces import AccessGrantor

__all__ = [
    "AccessGrantor",
    "CourseAccessGrantor",
    "DownloadAccessGrantor",
    "EventAccessGrantor",
    "default_grantors",
]
