"""Occurrence resolution for recurring and one-off appointments.

Every calendar view answers the same two questions: does an appointment
happen on a given day, and who performs it. This module is the single
implementation of both. All functions are pure; callers pass the date range
explicitly rather than relying on the current date.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from typing import Iterable, Iterator, Optional, Sequence

from ...models.domain import (
    AppointmentDefinition,
    Diagnostic,
    DiagnosticKind,
    Occurrence,
    Weekday,
)
from ..diagnostics import DiagnosticCollector

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Date range ends ({self.end}) before it starts ({self.start}).")

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    @classmethod
    def single(cls, day: date) -> "DateRange":
        return cls(day, day)

    @classmethod
    def week_of(cls, day: date, first_weekday: Weekday = Weekday.SUNDAY) -> "DateRange":
        offset = (day.weekday() - first_weekday.value) % 7
        start = day - timedelta(days=offset)
        return cls(start, start + timedelta(days=6))

    @classmethod
    def month_of(cls, day: date) -> "DateRange":
        last_day = calendar.monthrange(day.year, day.month)[1]
        return cls(day.replace(day=1), day.replace(day=last_day))


def validate_definition(definition: AppointmentDefinition) -> Optional[str]:
    """Return why ``definition`` cannot be resolved, or None if it is usable."""

    if definition.recurring and not definition.weekdays:
        return "recurring appointment has no weekday selected"
    if not definition.recurring and definition.single_date is None:
        return "one-time appointment has no date"
    return None


def occurs_on(definition: AppointmentDefinition, day: date) -> bool:
    if definition.canceled_entirely:
        return False
    if day in definition.cancellations:
        return False
    if not definition.recurring:
        return definition.single_date == day
    return Weekday.of(day) in definition.weekdays


def resolve_occurrence(
    definition: AppointmentDefinition,
    day: date,
    diagnostics: Optional[DiagnosticCollector] = None,
) -> Optional[Occurrence]:
    """Build the occurrence of ``definition`` on ``day`` with its attribution.

    The first accepted delegation covering the day wins. Later accepted
    delegations claiming the same day are reported but never change the result.
    """

    if not occurs_on(definition, day):
        return None

    covering = [delegation for delegation in definition.delegations if delegation.covers(day)]
    if not covering:
        return Occurrence(
            appointment_id=definition.id,
            date=day,
            start_time=definition.start_time,
            end_time=definition.end_time,
        )

    winner = covering[0]
    if len(covering) > 1:
        reason = (
            f"{len(covering)} accepted delegations cover this date; "
            f"using the first, covering user {winner.covering_user_id}"
        )
        if diagnostics is not None:
            diagnostics.record(DiagnosticKind.DELEGATION_OVERLAP, definition.id, reason, day)
        else:
            logger.warning(f"Delegation overlap for {definition.id} on {day}: {reason}")

    return Occurrence(
        appointment_id=definition.id,
        date=day,
        start_time=definition.start_time,
        end_time=definition.end_time,
        is_delegated=True,
        covering_user_id=winner.covering_user_id,
        covering_percentage=winner.covering_percentage,
    )


def _sort_key(occurrence: Occurrence):
    return (occurrence.date, occurrence.start_time, occurrence.end_time)


class OccurrenceListing:
    """Lazy, restartable sequence of occurrences over a bounded date range.

    Iteration walks the range one day at a time, yielding that day's
    occurrences ordered by start time and then end time. Each new iteration
    recomputes from the same immutable inputs.
    """

    def __init__(
        self,
        definitions: Sequence[AppointmentDefinition],
        date_range: DateRange,
        diagnostics: DiagnosticCollector,
    ) -> None:
        self.definitions = tuple(definitions)
        self.date_range = date_range
        self.diagnostics = diagnostics

    def __iter__(self) -> Iterator[Occurrence]:
        for day in self.date_range.days():
            todays = []
            for definition in self.definitions:
                occurrence = resolve_occurrence(definition, day, self.diagnostics)
                if occurrence is not None:
                    todays.append(occurrence)
            todays.sort(key=_sort_key)
            yield from todays


def list_occurrences(
    definitions: Iterable[AppointmentDefinition],
    date_range: DateRange,
    diagnostics: Optional[DiagnosticCollector] = None,
) -> OccurrenceListing:
    """Enumerate occurrences of ``definitions`` across ``date_range``.

    Malformed definitions are dropped up front and reported on ``diagnostics``;
    the remaining definitions are resolved lazily as the listing is iterated.
    """

    if definitions is None:
        raise ValueError("definitions must be provided")
    diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()

    usable: list[AppointmentDefinition] = []
    for definition in definitions:
        reason = validate_definition(definition)
        if reason is not None:
            diagnostics.record(DiagnosticKind.MALFORMED_DEFINITION, definition.id, reason)
            continue
        usable.append(definition)

    return OccurrenceListing(usable, date_range, diagnostics)


@lru_cache(maxsize=128)
def cached_listing(
    definitions: tuple[AppointmentDefinition, ...],
    date_range: DateRange,
) -> tuple[tuple[Occurrence, ...], tuple[Diagnostic, ...]]:
    """Materialized ``list_occurrences`` memoized on the structural value of its inputs."""

    diagnostics = DiagnosticCollector()
    occurrences = tuple(list_occurrences(definitions, date_range, diagnostics))
    return occurrences, tuple(diagnostics)
