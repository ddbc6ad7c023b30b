"""Route group exports."""

from . import health, occurrences, timeline

__all__ = ["health", "occurrences", "timeline"]
