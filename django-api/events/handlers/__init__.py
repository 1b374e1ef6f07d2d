from events.handlers.views import EventAvailabilityView

__all__ = ["EventAvailabilityView"]
