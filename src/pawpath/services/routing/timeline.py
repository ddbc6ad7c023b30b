"""Walk itinerary simulation over an optimizer-supplied stop order."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import time
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import DiagnosticKind, Stop, StopType, TimedStop
from ..diagnostics import DiagnosticCollector
from ..geospatial import distance_between, travel_minutes
from .models import RouteTimeline

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceTimes:
    pickup_minutes: float = settings.pickup_service_minutes
    dropoff_minutes: float = settings.dropoff_service_minutes
    default_walk_minutes: float = settings.default_walk_duration_minutes


def to_minutes(value: time) -> float:
    return value.hour * 60 + value.minute + value.second / 60


def _start_minutes(stops: Sequence[Stop], now: time) -> float:
    windows = [to_minutes(stop.window_start) for stop in stops if stop.window_start is not None]
    if windows:
        return min(windows)
    return to_minutes(now)


def _walk_minutes(stop: Stop, service: ServiceTimes) -> float:
    if stop.service_duration is None or not math.isfinite(stop.service_duration):
        return service.default_walk_minutes
    return max(0.0, stop.service_duration)


def simulate(
    stops: Sequence[Stop],
    walking_speed_mph: float,
    now: time,
    *,
    service: Optional[ServiceTimes] = None,
    diagnostics: Optional[DiagnosticCollector] = None,
) -> RouteTimeline:
    """Time-stamp ``stops`` in the order given.

    The clock starts at the earliest window start of any stop (or ``now``
    when no stop has one), advances by Haversine walking time between stops,
    waits for pickup and solo windows to open, adds each walk group's walk
    time once at its first dropoff and adds per-stop service time after each
    arrival. Stops are never reordered or rejected; missing coordinates and
    missed windows are flagged on the output instead.
    """

    if stops is None:
        raise ValueError("stops must be provided")
    if walking_speed_mph is None or not math.isfinite(walking_speed_mph) or walking_speed_mph <= 0:
        raise ValueError(f"walking_speed_mph must be a positive number, got {walking_speed_mph!r}")

    service = service or ServiceTimes()
    diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()

    start = _start_minutes(stops, now)
    clock = start
    walked_groups: set[str] = set()
    total_walk = 0.0
    timed: list[TimedStop] = []
    total_distance = 0.0
    total_travel = 0.0

    for index, stop in enumerate(stops):
        distance = 0.0
        travel = 0.0
        unreliable = False
        if index > 0:
            previous = stops[index - 1]
            leg = distance_between(previous.coordinates, stop.coordinates)
            if leg is None:
                unreliable = True
                diagnostics.record(
                    DiagnosticKind.DEGRADED_GEODATA,
                    stop.id,
                    f"missing coordinates on the leg from stop {previous.id}; travel assumed to be zero",
                )
            else:
                distance = leg
                travel = travel_minutes(distance, walking_speed_mph)
                clock += travel
        elif not stop.coordinates.is_valid:
            unreliable = True
            diagnostics.record(DiagnosticKind.DEGRADED_GEODATA, stop.id, "stop has no usable coordinates")

        windowed = stop.stop_type in (StopType.PICKUP, StopType.SOLO)
        if windowed and stop.window_start is not None:
            clock = max(clock, to_minutes(stop.window_start))

        if stop.stop_type is StopType.DROPOFF and stop.group_key not in walked_groups:
            walked_groups.add(stop.group_key)
            walk = _walk_minutes(stop, service)
            clock += walk
            total_walk += walk

        window_violated = windowed and stop.window_end is not None and clock > to_minutes(stop.window_end)
        if window_violated:
            diagnostics.record(
                DiagnosticKind.WINDOW_VIOLATION,
                stop.id,
                f"arrival at {clock:.1f} min is after the window end {stop.window_end.isoformat('minutes')}",
            )

        timed.append(
            TimedStop(
                stop=stop,
                stop_number=index + 1,
                arrival_minutes=clock,
                distance_from_previous=distance,
                travel_minutes_from_previous=travel,
                timing_unreliable=unreliable,
                window_violated=window_violated,
            )
        )
        total_distance += distance
        total_travel += travel

        if stop.stop_type is StopType.PICKUP:
            clock += service.pickup_minutes
        elif stop.stop_type is StopType.DROPOFF:
            clock += service.dropoff_minutes
        else:
            walk = _walk_minutes(stop, service)
            clock += walk
            total_walk += walk

    logger.info(
        f"Simulated {len(timed)} stops: {total_distance:.2f} mi, "
        f"{total_travel:.0f} min travel, {len(diagnostics)} diagnostics"
    )
    return RouteTimeline(
        stops=timed,
        start_minutes=start,
        end_minutes=clock,
        total_distance_miles=total_distance,
        total_travel_minutes=total_travel,
        total_walk_minutes=total_walk,
        diagnostics=list(diagnostics),
    )
