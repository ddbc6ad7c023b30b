"""Occurrence listing orchestration for calendar views."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from ...config import settings
from ...models.domain import AppointmentDefinition, DiagnosticKind, Weekday
from ...schemas.occurrences import (
    AppointmentDefinitionModel,
    DiagnosticModel,
    OccurrenceModel,
    OccurrenceRequest,
    OccurrenceResponse,
)
from ..diagnostics import DiagnosticCollector, diagnostic_to_json
from .earnings import occurrence_split, original_percentage
from .resolver import DateRange, cached_listing

logger = logging.getLogger(__name__)


def resolve_range(payload: OccurrenceRequest) -> DateRange:
    if payload.view == "day":
        return DateRange.single(payload.date)
    if payload.view == "week":
        return DateRange.week_of(payload.date, Weekday.parse(settings.first_weekday))
    if payload.view == "month":
        return DateRange.month_of(payload.date)
    return DateRange(payload.start, payload.end)


def _error_summary(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "record"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def parse_definitions(
    records: Sequence[Mapping[str, Any]],
    diagnostics: DiagnosticCollector,
) -> tuple[list[AppointmentDefinition], dict[str, int]]:
    """Validate raw records one by one; unparsable records are reported, not raised."""

    definitions: list[AppointmentDefinition] = []
    prices: dict[str, int] = {}
    for position, record in enumerate(records):
        try:
            model = AppointmentDefinitionModel.model_validate(record)
        except ValidationError as exc:
            subject = str(record.get("id", f"#{position}")) if isinstance(record, Mapping) else f"#{position}"
            diagnostics.record(DiagnosticKind.MALFORMED_DEFINITION, subject, _error_summary(exc))
            continue
        definitions.append(model.to_domain())
        if model.price_cents is not None:
            prices[model.id] = model.price_cents
    return definitions, prices


def build_occurrence_listing(payload: OccurrenceRequest) -> OccurrenceResponse:
    date_range = resolve_range(payload)
    if len(date_range) > settings.max_range_days:
        raise ValueError(
            f"Date range of {len(date_range)} days exceeds the limit of {settings.max_range_days} days."
        )

    diagnostics = DiagnosticCollector()
    definitions, prices = parse_definitions(payload.definitions, diagnostics)
    occurrences, listing_diagnostics = cached_listing(tuple(definitions), date_range)

    items: list[OccurrenceModel] = []
    for occurrence in occurrences:
        item = OccurrenceModel(
            appointment_id=occurrence.appointment_id,
            date=occurrence.date,
            start_time=occurrence.start_time,
            end_time=occurrence.end_time,
            is_delegated=occurrence.is_delegated,
            covering_user_id=occurrence.covering_user_id,
            covering_percentage=occurrence.covering_percentage,
        )
        if occurrence.is_delegated:
            item.original_percentage = original_percentage(occurrence.covering_percentage or 0)
        price = prices.get(occurrence.appointment_id)
        if price is not None:
            split = occurrence_split(occurrence, price)
            item.covering_amount_cents = split.covering
            item.original_amount_cents = split.original
        items.append(item)

    logger.info(
        f"Listed {len(items)} occurrences for {len(definitions)} definitions "
        f"between {date_range.start} and {date_range.end}"
    )
    return OccurrenceResponse(
        start=date_range.start,
        end=date_range.end,
        count=len(items),
        occurrences=items,
        diagnostics=[
            DiagnosticModel(**diagnostic_to_json(item))
            for item in (*diagnostics, *listing_diagnostics)
        ],
    )
