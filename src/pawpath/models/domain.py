"""Domain models for appointment definitions, occurrences and walk stops."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import FrozenSet, Optional, Tuple, Union


class Weekday(int, Enum):
    """Day of week numbered like ``date.weekday()`` (Monday is 0)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return cls(day.weekday())

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Accept full names ("wednesday") or three-letter codes ("WED")."""
        token = value.strip().upper()
        for member in cls:
            if member.name == token or member.name[:3] == token:
                return member
        raise ValueError(f"Unknown weekday '{value}'")


class WalkType(str, Enum):
    GROUP = "group"
    SOLO = "solo"
    TRAINING = "training"
    SIBLING = "sibling"


class DelegationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class StopType(str, Enum):
    PICKUP = "pickup"
    DROPOFF = "dropoff"
    SOLO = "solo"


class _AllDates:
    """Sentinel meaning a delegation covers every occurrence date."""

    _instance: Optional["_AllDates"] = None

    def __new__(cls) -> "_AllDates":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __contains__(self, item: object) -> bool:
        return isinstance(item, date)

    def __repr__(self) -> str:
        return "ALL_DATES"


ALL_DATES = _AllDates()

ShareDates = Union[FrozenSet[date], _AllDates]


@dataclass(frozen=True, slots=True)
class Delegation:
    """A request for another walker to cover some or all occurrences."""

    covering_user_id: str
    status: DelegationStatus
    share_dates: ShareDates = ALL_DATES
    covering_percentage: int = 0

    def covers(self, day: date) -> bool:
        return self.status is DelegationStatus.ACCEPTED and day in self.share_dates


@dataclass(frozen=True, slots=True)
class AppointmentDefinition:
    """A recurring or one-off appointment as supplied by the persistence layer."""

    id: str
    recurring: bool
    start_time: time
    end_time: time
    weekdays: FrozenSet[Weekday] = frozenset()
    single_date: Optional[date] = None
    duration: int = 30
    walk_type: WalkType = WalkType.GROUP
    canceled_entirely: bool = False
    cancellations: FrozenSet[date] = frozenset()
    delegations: Tuple[Delegation, ...] = ()


@dataclass(frozen=True, slots=True)
class Occurrence:
    """A concrete visit of an appointment on one calendar date."""

    appointment_id: str
    date: date
    start_time: time
    end_time: time
    is_delegated: bool = False
    covering_user_id: Optional[str] = None
    covering_percentage: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: Optional[float]
    lng: Optional[float]

    @property
    def is_valid(self) -> bool:
        if self.lat is None or self.lng is None:
            return False
        return math.isfinite(self.lat) and math.isfinite(self.lng)


@dataclass(frozen=True, slots=True)
class Stop:
    """One pickup, dropoff or solo walk in an optimizer-supplied sequence."""

    id: str
    appointment_id: str
    stop_type: StopType
    coordinates: Coordinates
    walk_group_id: Optional[str] = None
    window_start: Optional[time] = None
    window_end: Optional[time] = None
    service_duration: Optional[float] = None
    pet_name: str = ""
    address: str = ""

    @property
    def group_key(self) -> str:
        """Walk group this stop belongs to; ungrouped stops form their own group."""
        return self.walk_group_id or f"appointment:{self.appointment_id}"


@dataclass(frozen=True, slots=True)
class TimedStop:
    """A stop annotated with its simulated arrival."""

    stop: Stop
    stop_number: int
    arrival_minutes: float
    distance_from_previous: float
    travel_minutes_from_previous: float
    timing_unreliable: bool = False
    window_violated: bool = False

    @property
    def arrival_time(self) -> time:
        total_seconds = int(round(self.arrival_minutes * 60)) % (24 * 60 * 60)
        return time(total_seconds // 3600, (total_seconds // 60) % 60, total_seconds % 60)

    @property
    def distance_display(self) -> float:
        return round(self.distance_from_previous, 2)

    @property
    def travel_minutes_display(self) -> int:
        return int(round(self.travel_minutes_from_previous))


class DiagnosticKind(str, Enum):
    MALFORMED_DEFINITION = "malformed_definition"
    DEGRADED_GEODATA = "degraded_geodata"
    DELEGATION_OVERLAP = "delegation_overlap"
    WINDOW_VIOLATION = "window_violation"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A recoverable data-quality problem found while computing a result."""

    kind: DiagnosticKind
    subject_id: str
    reason: str
    date: Optional[date] = field(default=None)
