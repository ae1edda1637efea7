"""
Data model for the traffic tools.

Upstream Directions API payloads, typed tool arguments, tool results and the
outcome union passed from the dispatcher to the transports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator

TravelMode = Literal["driving", "walking", "bicycling", "transit"]
TRAVEL_MODES = ["driving", "walking", "bicycling", "transit"]


class TrafficModel(str, Enum):
    BEST_GUESS = "best_guess"
    PESSIMISTIC = "pessimistic"


# ============================================================================
# Directions API payloads
# ============================================================================
class _Upstream(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TextValue(_Upstream):
    text: str
    value: int


class RouteStep(_Upstream):
    html_instructions: str = ""
    distance: TextValue
    duration: TextValue
    duration_in_traffic: TextValue | None = None


class RouteLeg(_Upstream):
    start_address: str = ""
    end_address: str = ""
    distance: TextValue
    duration: TextValue
    duration_in_traffic: TextValue | None = None
    steps: list[RouteStep] = []


class Route(_Upstream):
    summary: str = ""
    warnings: list[str] = []
    legs: list[RouteLeg]

    @property
    def leg(self) -> RouteLeg:
        return self.legs[0]


# ============================================================================
# Typed tool arguments
# ============================================================================
class _ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    mode: TravelMode = "driving"


class LiveTrafficArgs(_ToolArgs):
    pass


class ForecastTrafficArgs(_ToolArgs):
    departure_time: str = Field(min_length=1)


class TrafficComparisonArgs(_ToolArgs):
    forecast_hours: Union[StrictInt, StrictFloat] = 1

    @field_validator("forecast_hours", mode="before")
    @classmethod
    def _reject_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("forecast_hours must be a number")
        return value

    @field_validator("forecast_hours")
    @classmethod
    def _within_forecast_window(cls, value):
        if not 1 <= value <= 24:
            raise ValueError("forecast_hours must be between 1 and 24")
        # 2.0 echoes back as 2
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


# ============================================================================
# Tool results
# ============================================================================
class StepSummary(BaseModel):
    instruction: str
    distance: str
    duration: str
    has_traffic_data: bool


class TrafficResult(BaseModel):
    origin: str
    destination: str
    distance: str
    duration: str
    duration_in_traffic: str
    traffic_summary: str
    steps: list[StepSummary]


class ForecastResult(BaseModel):
    departure_time: str
    origin: str
    destination: str
    forecast_distance: str
    forecast_duration: str
    forecast_duration_in_traffic: str
    traffic_model: str
    confidence_level: str


class CurrentTraffic(BaseModel):
    distance: str
    duration: str
    duration_in_traffic: str


class ForecastTraffic(BaseModel):
    hours_ahead: Union[int, float]
    departure_time: str
    distance: str
    duration: str
    duration_in_traffic: str


class Comparison(BaseModel):
    time_difference_seconds: int
    recommendation: str


class ComparisonResult(BaseModel):
    origin: str
    destination: str
    current_traffic: CurrentTraffic
    forecast_traffic: ForecastTraffic
    comparison: Comparison


# ============================================================================
# Dispatch outcomes
# ============================================================================
class FailureKind(str, Enum):
    UNKNOWN_TOOL = "unknown_tool"
    INVALID_ARGUMENTS = "invalid_arguments"
    UPSTREAM_ERROR = "upstream_error"
    TOOL_EXECUTION_FAILED = "tool_execution_failed"


@dataclass(frozen=True)
class ToolSuccess:
    """Displayable payload (JSON or an informational sentence)."""
    text: str


@dataclass(frozen=True)
class ToolFailure:
    kind: FailureKind
    message: str


ToolOutcome = Union[ToolSuccess, ToolFailure]
