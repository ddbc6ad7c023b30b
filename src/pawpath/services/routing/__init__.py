"""Route timeline exports."""

from .models import RouteTimeline
from .timeline import ServiceTimes, simulate

__all__ = ["RouteTimeline", "ServiceTimes", "simulate"]
