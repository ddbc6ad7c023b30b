"""Route timeline endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse

from ...schemas.routing import TimelineRequest, TimelineResponse
from ...services.routing.service import build_timeline, export_timeline_csv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/timeline", response_model=TimelineResponse, status_code=status.HTTP_200_OK)
def timeline(payload: TimelineRequest) -> TimelineResponse:
    """Annotate an optimizer stop order with arrival times and leg distances."""
    try:
        return build_timeline(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error simulating route timeline: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to simulate route timeline: {str(exc)}"
        ) from exc


@router.post("/timeline.csv", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
def timeline_csv(payload: TimelineRequest) -> PlainTextResponse:
    try:
        content = export_timeline_csv(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error exporting route timeline: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export route timeline: {str(exc)}"
        ) from exc
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="route_timeline.csv"'},
    )
