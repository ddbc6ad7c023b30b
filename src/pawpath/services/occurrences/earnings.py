"""Income split between the original and covering walker of a shared occurrence."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ...models.domain import Occurrence


@dataclass(frozen=True, slots=True)
class EarningsSplit:
    covering: int
    original: int


def original_percentage(covering_percentage: int) -> int:
    return 100 - covering_percentage


def split_earnings(total_price_cents: int, covering_percentage: int) -> EarningsSplit:
    """Covering walker gets the rounded share; the original walker keeps the remainder."""

    if isinstance(covering_percentage, bool) or not isinstance(covering_percentage, int):
        raise ValueError("covering_percentage must be an integer")
    if not 0 <= covering_percentage <= 100:
        raise ValueError("covering_percentage must be between 0 and 100")

    exact = Decimal(total_price_cents) * covering_percentage / 100
    covering = int(exact.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return EarningsSplit(covering=covering, original=total_price_cents - covering)


def occurrence_split(occurrence: Occurrence, total_price_cents: int) -> EarningsSplit:
    if not occurrence.is_delegated:
        return EarningsSplit(covering=0, original=total_price_cents)
    return split_earnings(total_price_cents, occurrence.covering_percentage or 0)
