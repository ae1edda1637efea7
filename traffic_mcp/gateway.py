"""
Directions Gateway: one request/response call to the Google Directions API.

No retries and no caching; callers needing two departure times issue two
calls.
"""

import logging
from datetime import datetime
from typing import Optional, Union

import httpx
from pydantic import ValidationError

from traffic_mcp.config import DEFAULT_DIRECTIONS_URL
from traffic_mcp.models import Route, TrafficModel

logger = logging.getLogger(__name__)

DepartureTime = Union[str, datetime]
NO_ROUTE_STATUSES = ("ZERO_RESULTS",)


class UpstreamError(Exception):
    """Network, auth, quota or request failure reported by the directions provider."""


def _format_departure_time(departure_time: DepartureTime) -> str:
    if isinstance(departure_time, datetime):
        return str(int(departure_time.timestamp()))
    # "now", or an unparsed caller value the provider will judge
    return departure_time


class DirectionsGateway:
    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_DIRECTIONS_URL,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self._base_url = base_url
        self._client = client

    async def get_route(
        self,
        origin: str,
        destination: str,
        mode: str,
        departure_time: DepartureTime,
        traffic_model: TrafficModel,
    ) -> Optional[Route]:
        """
        Fetch directions and return the first route, or None when the
        provider finds no route.

        Raises:
            UpstreamError: on transport failures or any non-OK API status.
        """
        params = {
            "origin": origin,
            "destination": destination,
            "mode": mode,
            "departure_time": _format_departure_time(departure_time),
            "traffic_model": traffic_model.value,
            "key": self._api_key,
        }
        logger.debug(
            "Directions request mode=%s departure_time=%s traffic_model=%s",
            mode, params["departure_time"], traffic_model.value,
        )
        data = await self._get_json(params)

        status = data.get("status", "OK")
        if status in NO_ROUTE_STATUSES:
            return None
        if status != "OK":
            message = data.get("error_message") or status
            logger.warning("Directions API returned %s: %s", status, message)
            raise UpstreamError(message)

        routes = data.get("routes") or []
        if not routes:
            return None
        try:
            route = Route.model_validate(routes[0])
        except ValidationError as e:
            raise UpstreamError(f"Unexpected directions payload: {e.error_count()} invalid field(s)") from e
        if not route.legs:
            return None
        return route

    async def _get_json(self, params: dict) -> dict:
        try:
            if self._client is not None:
                response = await self._client.get(self._base_url, params=params)
            else:
                async with httpx.AsyncClient(timeout=None) as client:
                    response = await client.get(self._base_url, params=params)
        except httpx.RequestError as e:
            logger.warning("Directions API request error: %s", e.__class__.__name__)
            raise UpstreamError(str(e) or e.__class__.__name__) from e

        if response.status_code != 200:
            message = _error_message(response)
            raise UpstreamError(f"HTTP {response.status_code}: {message}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Directions API returned a non-JSON response") from e
        if not isinstance(data, dict):
            raise UpstreamError("Directions API returned an unexpected response")
        return data


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("error_message"):
        return body["error_message"]
    return response.text
