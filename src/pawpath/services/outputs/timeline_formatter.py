"""Serializers for route timeline outputs."""

from __future__ import annotations

import csv
import io

from ...models.domain import TimedStop
from ..diagnostics import diagnostic_to_json
from ..routing.models import RouteTimeline


def format_clock(minutes: float) -> str:
    """Render minutes since midnight as a 12-hour clock, e.g. ``9:05 AM``."""

    total = int(round(minutes)) % (24 * 60)
    hour, minute = divmod(total, 60)
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:{minute:02d} {suffix}"


def timed_stop_to_json(timed: TimedStop) -> dict:
    stop = timed.stop
    return {
        "id": stop.id,
        "appointment_id": stop.appointment_id,
        "walk_group_id": stop.walk_group_id,
        "stop_type": stop.stop_type.value,
        "pet_name": stop.pet_name,
        "address": stop.address,
        "coordinates": {"lat": stop.coordinates.lat, "lng": stop.coordinates.lng},
        "stop_number": timed.stop_number,
        "arrival_time": format_clock(timed.arrival_minutes),
        "arrival_minutes": timed.arrival_minutes,
        "distance_from_previous": timed.distance_display,
        "travel_time_from_previous": timed.travel_minutes_display,
        "timing_unreliable": timed.timing_unreliable,
        "window_violated": timed.window_violated,
    }


def timeline_to_json(timeline: RouteTimeline) -> dict:
    return {
        "stops": [timed_stop_to_json(timed) for timed in timeline],
        "summary": {
            "start_time": format_clock(timeline.start_minutes),
            "end_time": format_clock(timeline.end_minutes),
            "total_distance": round(timeline.total_distance_miles, 2),
            "total_travel_time": int(round(timeline.total_travel_minutes)),
            "total_walk_time": int(round(timeline.total_walk_minutes)),
            "total_time": int(round(timeline.total_minutes)),
            "timing_unreliable": timeline.has_unreliable_timing,
        },
        "diagnostics": [diagnostic_to_json(item) for item in timeline.diagnostics],
    }


def timeline_to_csv(timeline: RouteTimeline) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "stop_number",
        "stop_type",
        "pet_name",
        "address",
        "arrival_time",
        "distance_from_previous",
        "travel_time_from_previous",
        "timing_unreliable",
        "window_violated",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for timed in timeline:
        writer.writerow(
            {
                "stop_number": timed.stop_number,
                "stop_type": timed.stop.stop_type.value,
                "pet_name": timed.stop.pet_name,
                "address": timed.stop.address,
                "arrival_time": format_clock(timed.arrival_minutes),
                "distance_from_previous": f"{timed.distance_display:.2f}",
                "travel_time_from_previous": timed.travel_minutes_display,
                "timing_unreliable": timed.timing_unreliable,
                "window_violated": timed.window_violated,
            }
        )
    return buffer.getvalue()
