"""
Pure helpers deriving summaries and recommendations from Directions legs.
"""

import html
import math
import re

from traffic_mcp.models import Route, RouteLeg

SIMILAR_THRESHOLD_MINUTES = 5

_TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_markup(text: str) -> str:
    """Drop HTML tags from a step instruction and decode entities."""
    return html.unescape(_TAG_PATTERN.sub("", text)).strip()


def summarize_conditions(route: Route) -> str:
    if route.warnings:
        return f"Traffic alerts: {', '.join(route.warnings)}"
    return "No major traffic issues detected."


def effective_duration(leg: RouteLeg) -> int:
    """Traffic-adjusted duration in seconds when available, else the plain one."""
    if leg.duration_in_traffic is not None:
        return leg.duration_in_traffic.value
    return leg.duration.value


def time_difference_seconds(current: RouteLeg, forecast: RouteLeg) -> int:
    """Forecast minus current; positive means the forecast trip is slower."""
    return effective_duration(forecast) - effective_duration(current)


def _round_minutes(minutes: float) -> int:
    return math.floor(minutes + 0.5)


def _format_hours(hours: float) -> str:
    return str(int(hours)) if float(hours).is_integer() else str(hours)


def recommend(current: RouteLeg, forecast: RouteLeg, hours_ahead: float) -> str:
    """
    Turn the current/forecast difference into travel advice.

    Differences strictly under five minutes count as similar; exactly five
    minutes is reported as worse or better.
    """
    difference = time_difference_seconds(current, forecast)
    difference_minutes = abs(difference) / 60

    if difference_minutes < SIMILAR_THRESHOLD_MINUTES:
        return "Traffic conditions expected to be similar. Safe to proceed as planned."

    minutes = _round_minutes(difference_minutes)
    hours = _format_hours(hours_ahead)
    if difference > 0:
        return (
            f"Traffic expected to be {minutes} minutes worse in {hours} hour(s). "
            "Consider leaving earlier or finding an alternative route."
        )
    return f"Traffic expected to be {minutes} minutes better in {hours} hour(s). Good time to travel!"
