"""Occurrence resolution exports."""

from .earnings import EarningsSplit, occurrence_split, split_earnings
from .resolver import (
    DateRange,
    OccurrenceListing,
    list_occurrences,
    occurs_on,
    resolve_occurrence,
    validate_definition,
)

__all__ = [
    "DateRange",
    "OccurrenceListing",
    "list_occurrences",
    "occurs_on",
    "resolve_occurrence",
    "validate_definition",
    "EarningsSplit",
    "split_earnings",
    "occurrence_split",
]
