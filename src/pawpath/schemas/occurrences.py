"""Occurrence request/response schemas."""

from __future__ import annotations

from datetime import date as Date
from datetime import time as Time
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.domain import (
    ALL_DATES,
    AppointmentDefinition,
    Delegation,
    DelegationStatus,
    WalkType,
    Weekday,
)

_DAY_FLAGS = tuple(member.name.lower() for member in Weekday)


class DelegationModel(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    covering_user_id: str = Field(validation_alias=AliasChoices("covering_user_id", "shared_with_user_id"))
    status: DelegationStatus = DelegationStatus.PENDING
    share_dates: Optional[Union[Literal["all"], List[Date]]] = Field(
        default=None,
        description='Covered dates or "all"; when omitted only one-time appointments are fully shared.',
    )
    covering_percentage: int = Field(
        default=0,
        ge=0,
        le=100,
        validation_alias=AliasChoices("covering_percentage", "covering_walker_percentage"),
    )

    def to_domain(self, recurring: bool) -> Delegation:
        if self.share_dates is None:
            share_dates = frozenset() if recurring else ALL_DATES
        elif self.share_dates == "all":
            share_dates = ALL_DATES
        else:
            share_dates = frozenset(self.share_dates)
        return Delegation(
            covering_user_id=self.covering_user_id,
            status=self.status,
            share_dates=share_dates,
            covering_percentage=self.covering_percentage,
        )


class AppointmentDefinitionModel(BaseModel):
    """Appointment record as stored by the scheduling backend.

    Weekdays may be given either as a ``weekdays`` list or as the per-day
    boolean columns (``monday`` ... ``sunday``) used by the appointments table.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    recurring: bool = False
    weekdays: List[Weekday] = Field(default_factory=list)
    single_date: Optional[Date] = Field(
        default=None,
        validation_alias=AliasChoices("single_date", "appointment_date"),
    )
    start_time: Time
    end_time: Time
    duration: int = Field(default=30, ge=0)
    walk_type: WalkType = WalkType.GROUP
    canceled_entirely: bool = Field(default=False, validation_alias=AliasChoices("canceled_entirely", "canceled"))
    cancellations: List[Date] = Field(default_factory=list)
    delegations: List[DelegationModel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("delegations", "appointment_shares"),
    )
    price_cents: Optional[int] = Field(default=None, ge=0, description="Price of one visit, used for income split.")

    @model_validator(mode="before")
    @classmethod
    def _collect_day_flags(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "weekdays" in data:
            return data
        flagged = [name for name in _DAY_FLAGS if data.get(name)]
        if flagged:
            data = {**data, "weekdays": flagged}
        return data

    @field_validator("weekdays", mode="before")
    @classmethod
    def _parse_weekdays(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [Weekday.parse(item) if isinstance(item, str) else item for item in value]
        return value

    def to_domain(self) -> AppointmentDefinition:
        return AppointmentDefinition(
            id=self.id,
            recurring=self.recurring,
            start_time=self.start_time,
            end_time=self.end_time,
            weekdays=frozenset(self.weekdays),
            single_date=self.single_date,
            duration=self.duration,
            walk_type=self.walk_type,
            canceled_entirely=self.canceled_entirely,
            cancellations=frozenset(self.cancellations),
            delegations=tuple(delegation.to_domain(self.recurring) for delegation in self.delegations),
        )


class OccurrenceRequest(BaseModel):
    view: Literal["day", "week", "month", "range"] = "range"
    date: Optional[Date] = Field(default=None, description="Anchor date for day, week and month views.")
    start: Optional[Date] = None
    end: Optional[Date] = None
    definitions: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Raw appointment records; invalid records are skipped and reported.",
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "OccurrenceRequest":
        if self.view == "range":
            if self.start is None or self.end is None:
                raise ValueError("start and end are required for a range query")
        elif self.date is None:
            raise ValueError(f"date is required for the {self.view} view")
        return self


class OccurrenceModel(BaseModel):
    appointment_id: str
    date: Date
    start_time: Time
    end_time: Time
    is_delegated: bool
    covering_user_id: Optional[str] = None
    covering_percentage: Optional[int] = None
    original_percentage: Optional[int] = None
    covering_amount_cents: Optional[int] = None
    original_amount_cents: Optional[int] = None


class DiagnosticModel(BaseModel):
    kind: str
    subject_id: str
    reason: str
    date: Optional[Date] = None


class OccurrenceResponse(BaseModel):
    start: Date
    end: Date
    count: int
    occurrences: List[OccurrenceModel]
    diagnostics: List[DiagnosticModel]
