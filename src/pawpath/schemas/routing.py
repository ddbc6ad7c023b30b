"""Route timeline request/response schemas."""

from __future__ import annotations

from datetime import time as Time
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..models.domain import Coordinates, Stop, StopType
from .occurrences import DiagnosticModel


class CoordinatesModel(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None


class StopModel(BaseModel):
    """One stop of an optimizer route, accepting the optimizer's field names."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    appointment_id: str
    walk_group_id: Optional[str] = None
    stop_type: StopType
    coordinates: CoordinatesModel = Field(default_factory=CoordinatesModel)
    window_start: Optional[Time] = Field(default=None, validation_alias=AliasChoices("window_start", "start_time"))
    window_end: Optional[Time] = Field(default=None, validation_alias=AliasChoices("window_end", "end_time"))
    service_duration: Optional[float] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("service_duration", "duration"),
    )
    pet_name: str = ""
    address: str = ""

    def to_domain(self) -> Stop:
        return Stop(
            id=self.id,
            appointment_id=self.appointment_id,
            stop_type=self.stop_type,
            coordinates=Coordinates(lat=self.coordinates.lat, lng=self.coordinates.lng),
            walk_group_id=self.walk_group_id,
            window_start=self.window_start,
            window_end=self.window_end,
            service_duration=self.service_duration,
            pet_name=self.pet_name,
            address=self.address,
        )


class TimelineRequest(BaseModel):
    stops: List[StopModel]
    now: Time
    walking_speed_mph: Optional[float] = Field(default=None, gt=0, description="Defaults to the configured speed.")


class TimedStopModel(BaseModel):
    id: str
    appointment_id: str
    walk_group_id: Optional[str]
    stop_type: StopType
    pet_name: str
    address: str
    coordinates: CoordinatesModel
    stop_number: int
    arrival_time: str
    arrival_minutes: float
    distance_from_previous: float
    travel_time_from_previous: int
    timing_unreliable: bool
    window_violated: bool


class TimelineSummaryModel(BaseModel):
    start_time: str
    end_time: str
    total_distance: float
    total_travel_time: int
    total_walk_time: int
    total_time: int
    timing_unreliable: bool


class TimelineResponse(BaseModel):
    stops: List[TimedStopModel]
    summary: TimelineSummaryModel
    diagnostics: List[DiagnosticModel]
