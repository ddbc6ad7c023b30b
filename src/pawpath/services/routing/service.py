"""Route timeline orchestration for the live walk and map views."""

from __future__ import annotations

import logging

from ...config import settings
from ...schemas.routing import TimelineRequest, TimelineResponse
from ..outputs.timeline_formatter import timeline_to_csv, timeline_to_json
from .models import RouteTimeline
from .timeline import simulate

logger = logging.getLogger(__name__)


def run_timeline(payload: TimelineRequest) -> RouteTimeline:
    stops = [stop.to_domain() for stop in payload.stops]
    speed = payload.walking_speed_mph or settings.walking_speed_mph
    return simulate(stops, speed, payload.now)


def build_timeline(payload: TimelineRequest) -> TimelineResponse:
    timeline = run_timeline(payload)
    if timeline.diagnostics:
        logger.info(f"Timeline for {len(timeline)} stops produced {len(timeline.diagnostics)} diagnostics")
    return TimelineResponse.model_validate(timeline_to_json(timeline))


def export_timeline_csv(payload: TimelineRequest) -> str:
    return timeline_to_csv(run_timeline(payload))
