"""Occurrence endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.occurrences import OccurrenceRequest, OccurrenceResponse
from ...services.occurrences.service import build_occurrence_listing

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/occurrences", tags=["occurrences"])


@router.post("", response_model=OccurrenceResponse, status_code=status.HTTP_200_OK)
def list_occurrences(payload: OccurrenceRequest) -> OccurrenceResponse:
    """Resolve which appointments occur in the requested day, week, month or range."""
    try:
        return build_occurrence_listing(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error listing occurrences: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list occurrences: {str(exc)}"
        ) from exc
