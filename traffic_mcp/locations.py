"""
Location normalization for Directions API requests.

Coordinates written as "lat,lng" are canonicalized; anything else is treated
as a free-form address and geocoded upstream.
"""

import re

COORDINATE_PATTERN = re.compile(r"^([+-]?\d+\.?\d*),\s*([+-]?\d+\.?\d*)$")


def normalize_location(location: str) -> str:
    """Return "lat,lng" for coordinate strings, otherwise the input unchanged."""
    match = COORDINATE_PATTERN.match(location.strip())
    if match:
        return f"{match.group(1)},{match.group(2)}"
    return location
