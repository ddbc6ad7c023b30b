"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from ...models.domain import Diagnostic, TimedStop


@dataclass(slots=True)
class RouteTimeline:
    """Simulated itinerary: timed stops in input order plus run totals."""

    stops: List[TimedStop]
    start_minutes: float
    end_minutes: float
    total_distance_miles: float
    total_travel_minutes: float
    total_walk_minutes: float
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def total_minutes(self) -> float:
        return self.end_minutes - self.start_minutes

    @property
    def has_unreliable_timing(self) -> bool:
        return any(stop.timing_unreliable for stop in self.stops)

    def __iter__(self) -> Iterator[TimedStop]:
        return iter(self.stops)

    def __len__(self) -> int:
        return len(self.stops)

    def __getitem__(self, index: int) -> TimedStop:
        return self.stops[index]
