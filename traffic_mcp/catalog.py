"""
Static catalog of the traffic tools and their JSON-schema parameters.

Both transports serve these exact definitions.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from traffic_mcp.models import TRAVEL_MODES

LOCATION_HINT = "(address or 'lat,lng')"


def _mode_property() -> dict:
    return {
        "type": "string",
        "enum": list(TRAVEL_MODES),
        "default": "driving",
        "description": "Travel mode",
    }


def _location_property(label: str) -> dict:
    return {"type": "string", "description": f"{label} location {LOCATION_HINT}"}


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Mapping[str, Any] = field(default_factory=dict)

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(self.input_schema.get("required", ()))

    def to_dict(self) -> dict:
        """MCP wire form: {name, description, inputSchema}."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": _thaw(self.input_schema),
        }


def _freeze(value):
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value):
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _definition(name: str, description: str, properties: dict, required: list[str]) -> ToolDefinition:
    schema = {"type": "object", "properties": properties, "required": required}
    return ToolDefinition(name=name, description=description, input_schema=_freeze(schema))


GET_LIVE_TRAFFIC = _definition(
    "get_live_traffic",
    "Get live traffic data between two locations using Google Maps",
    {
        "origin": _location_property("Origin"),
        "destination": _location_property("Destination"),
        "mode": _mode_property(),
    },
    ["origin", "destination"],
)

GET_FORECAST_TRAFFIC = _definition(
    "get_forecast_traffic",
    "Get forecast traffic data for future travel times",
    {
        "origin": _location_property("Origin"),
        "destination": _location_property("Destination"),
        "departure_time": {
            "type": "string",
            "description": (
                "Departure time in ISO format (e.g., '2024-01-15T09:00:00Z') "
                "or 'now' for immediate departure"
            ),
        },
        "mode": _mode_property(),
    },
    ["origin", "destination", "departure_time"],
)

GET_TRAFFIC_COMPARISON = _definition(
    "get_traffic_comparison",
    "Compare current vs forecast traffic for route planning",
    {
        "origin": _location_property("Origin"),
        "destination": _location_property("Destination"),
        "forecast_hours": {
            "type": "number",
            "description": "Hours from now to check forecast (1-24)",
            "minimum": 1,
            "maximum": 24,
            "default": 1,
        },
        "mode": _mode_property(),
    },
    ["origin", "destination"],
)

TOOL_CATALOG: tuple[ToolDefinition, ...] = (
    GET_LIVE_TRAFFIC,
    GET_FORECAST_TRAFFIC,
    GET_TRAFFIC_COMPARISON,
)

_BY_NAME = MappingProxyType({tool.name: tool for tool in TOOL_CATALOG})


def get_tool(name: str) -> ToolDefinition | None:
    return _BY_NAME.get(name)


def catalog_as_dicts() -> list[dict]:
    return [tool.to_dict() for tool in TOOL_CATALOG]
