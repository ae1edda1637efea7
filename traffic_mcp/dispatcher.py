"""
Tool Dispatcher: routes a tool call by name to its handler.

Arguments are checked against the catalog's required set, validated into the
tool's typed argument model, and the handler result (or exception) is packaged
as a ToolOutcome. Nothing raised by a handler escapes dispatch().
"""

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol

from pydantic import BaseModel, ValidationError

from traffic_mcp.analysis import (
    recommend,
    strip_markup,
    summarize_conditions,
    time_difference_seconds,
)
from traffic_mcp.catalog import get_tool
from traffic_mcp.gateway import DepartureTime, UpstreamError
from traffic_mcp.locations import normalize_location
from traffic_mcp.models import (
    Comparison,
    ComparisonResult,
    CurrentTraffic,
    FailureKind,
    ForecastResult,
    ForecastTraffic,
    ForecastTrafficArgs,
    LiveTrafficArgs,
    Route,
    RouteLeg,
    StepSummary,
    ToolFailure,
    ToolOutcome,
    ToolSuccess,
    TrafficComparisonArgs,
    TrafficModel,
    TrafficResult,
)

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Not available"
FORECAST_TRAFFIC_MODEL_LABEL = "pessimistic (worst-case scenario)"
FORECAST_CONFIDENCE_LABEL = "High - Based on historical and real-time data"

NO_LIVE_ROUTE_MESSAGE = "No routes found between the specified locations."
NO_FORECAST_ROUTE_MESSAGE = "No routes found for the specified time."
NO_COMPARISON_ROUTE_MESSAGE = "Unable to get traffic data for one or both time periods."


class RouteProvider(Protocol):
    async def get_route(
        self,
        origin: str,
        destination: str,
        mode: str,
        departure_time: DepartureTime,
        traffic_model: TrafficModel,
    ) -> Optional[Route]: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_departure_time(value: str) -> DepartureTime:
    """
    "now" passes through; ISO-8601 strings become aware datetimes (naive ones
    are taken as UTC). Anything unparseable is returned as-is for the provider
    to reject.
    """
    if value == "now":
        return value
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_json(result: BaseModel) -> str:
    return json.dumps(result.model_dump(), indent=2)


def _traffic_text(leg: RouteLeg, fallback: str) -> str:
    return leg.duration_in_traffic.text if leg.duration_in_traffic else fallback


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err["loc"]) or "arguments"
        parts.append(f"{field}: {err['msg']}")
    return "Invalid arguments: " + "; ".join(parts)


class ToolDispatcher:
    def __init__(self, gateway: RouteProvider, clock: Callable[[], datetime] = _utc_now):
        self._gateway = gateway
        self._clock = clock
        self._handlers: dict[str, tuple[type[BaseModel], Callable[[Any], Awaitable[str]]]] = {
            "get_live_traffic": (LiveTrafficArgs, self.get_live_traffic),
            "get_forecast_traffic": (ForecastTrafficArgs, self.get_forecast_traffic),
            "get_traffic_comparison": (TrafficComparisonArgs, self.get_traffic_comparison),
        }

    async def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolOutcome:
        tool = get_tool(name)
        if tool is None or name not in self._handlers:
            logger.warning("Rejected call to unknown tool %r", name)
            return ToolFailure(FailureKind.UNKNOWN_TOOL, f"Unknown tool: {name}")

        if arguments is not None and not isinstance(arguments, Mapping):
            return ToolFailure(FailureKind.INVALID_ARGUMENTS, "Invalid arguments: expected an object")
        arguments = dict(arguments or {})
        missing = [param for param in tool.required if arguments.get(param) is None]
        if missing:
            return ToolFailure(
                FailureKind.INVALID_ARGUMENTS,
                f"Missing required arguments: {', '.join(missing)}",
            )

        args_model, handler = self._handlers[name]
        try:
            args = args_model.model_validate(arguments)
        except ValidationError as e:
            return ToolFailure(FailureKind.INVALID_ARGUMENTS, _describe_validation_error(e))

        logger.info("Calling tool %s (mode=%s)", name, args.mode)
        try:
            return ToolSuccess(await handler(args))
        except UpstreamError as e:
            logger.warning("Tool %s failed upstream: %s", name, e)
            return ToolFailure(
                FailureKind.UPSTREAM_ERROR,
                f"Tool execution failed: Google Maps API error: {e}",
            )
        except Exception as e:
            logger.exception("Tool %s raised", name)
            return ToolFailure(FailureKind.TOOL_EXECUTION_FAILED, f"Tool execution failed: {e}")

    # ========================================================================
    # Handlers
    # ========================================================================
    async def get_live_traffic(self, args: LiveTrafficArgs) -> str:
        route = await self._gateway.get_route(
            normalize_location(args.origin),
            normalize_location(args.destination),
            args.mode,
            "now",
            TrafficModel.BEST_GUESS,
        )
        if route is None:
            return NO_LIVE_ROUTE_MESSAGE

        leg = route.leg
        result = TrafficResult(
            origin=leg.start_address,
            destination=leg.end_address,
            distance=leg.distance.text,
            duration=leg.duration.text,
            duration_in_traffic=_traffic_text(leg, NOT_AVAILABLE),
            traffic_summary=summarize_conditions(route),
            steps=[
                StepSummary(
                    instruction=strip_markup(step.html_instructions),
                    distance=step.distance.text,
                    duration=step.duration.text,
                    has_traffic_data=step.duration_in_traffic is not None,
                )
                for step in leg.steps
            ],
        )
        return _to_json(result)

    async def get_forecast_traffic(self, args: ForecastTrafficArgs) -> str:
        route = await self._gateway.get_route(
            normalize_location(args.origin),
            normalize_location(args.destination),
            args.mode,
            resolve_departure_time(args.departure_time),
            TrafficModel.PESSIMISTIC,
        )
        if route is None:
            return NO_FORECAST_ROUTE_MESSAGE

        leg = route.leg
        result = ForecastResult(
            departure_time=args.departure_time,
            origin=leg.start_address,
            destination=leg.end_address,
            forecast_distance=leg.distance.text,
            forecast_duration=leg.duration.text,
            forecast_duration_in_traffic=_traffic_text(leg, NOT_AVAILABLE),
            traffic_model=FORECAST_TRAFFIC_MODEL_LABEL,
            confidence_level=FORECAST_CONFIDENCE_LABEL,
        )
        return _to_json(result)

    async def get_traffic_comparison(self, args: TrafficComparisonArgs) -> str:
        origin = normalize_location(args.origin)
        destination = normalize_location(args.destination)
        forecast_time = self._clock() + timedelta(hours=args.forecast_hours)

        current_route, forecast_route = await asyncio.gather(
            self._gateway.get_route(origin, destination, args.mode, "now", TrafficModel.BEST_GUESS),
            self._gateway.get_route(origin, destination, args.mode, forecast_time, TrafficModel.PESSIMISTIC),
        )
        if current_route is None or forecast_route is None:
            return NO_COMPARISON_ROUTE_MESSAGE

        current, forecast = current_route.leg, forecast_route.leg
        result = ComparisonResult(
            origin=current.start_address,
            destination=current.end_address,
            current_traffic=CurrentTraffic(
                distance=current.distance.text,
                duration=current.duration.text,
                duration_in_traffic=_traffic_text(current, current.duration.text),
            ),
            forecast_traffic=ForecastTraffic(
                hours_ahead=args.forecast_hours,
                departure_time=forecast_time.isoformat(),
                distance=forecast.distance.text,
                duration=forecast.duration.text,
                duration_in_traffic=_traffic_text(forecast, forecast.duration.text),
            ),
            comparison=Comparison(
                time_difference_seconds=time_difference_seconds(current, forecast),
                recommendation=recommend(current, forecast, args.forecast_hours),
            ),
        )
        return _to_json(result)
