"""HTTP client for the Digitransit geocoding and routing APIs."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from ...config import settings
from ...models.domain import Coordinates, Itinerary
from ...schemas.itineraries import ItineraryModel

SUBSCRIPTION_KEY_HEADER = "digitransit-subscription-key"

PLAN_QUERY = """
{{
  plan(
    from: {{lat: {from_lat}, lon: {from_lon}}}
    to: {{lat: {to_lat}, lon: {to_lon}}}
    numItineraries: {num_itineraries}
    date: "{date}"
    time: "{time}"
  ) {{
    itineraries {{
      duration
      walkDistance
      legs {{
        startTime
        endTime
        mode
        duration
        realTime
        distance
        transitLeg
        trip {{
          route {{
            shortName
          }}
        }}
      }}
    }}
  }}
}}
"""

logger = logging.getLogger(__name__)


class WaypointNotFoundError(LookupError):
    """The geocoder returned no match for a waypoint name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Geocoder returned no match for '{name}'.")


class _Geometry(BaseModel):
    coordinates: tuple[float, float]


class _Feature(BaseModel):
    geometry: _Geometry


class _GeocodingResponse(BaseModel):
    features: list[_Feature]


class _Plan(BaseModel):
    itineraries: list[ItineraryModel]


class _PlanData(BaseModel):
    plan: _Plan


class _PlanResponse(BaseModel):
    data: _PlanData


class DigitransitClient:
    def __init__(
        self,
        api_key: str | None = None,
        geocoding_url: str | None = None,
        routing_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.digitransit_api_key
        if not self.api_key:
            raise ValueError(
                "Digitransit API key is not configured. Set DIGITRANSIT_PRIMARY_KEY or TOUR_DIGITRANSIT_API_KEY."
            )
        self.geocoding_url = geocoding_url or settings.digitransit_geocoding_url
        self.routing_url = routing_url or settings.digitransit_routing_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.http_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={SUBSCRIPTION_KEY_HEADER: self.api_key},
            transport=self._transport,
        )

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request with retries and return the decoded JSON body."""
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.request(method, url, **kwargs)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    if e.response.status_code in (401, 403):
                        raise ValueError(
                            f"Digitransit rejected the subscription key (HTTP {e.response.status_code})."
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Digitransit request timed out after {self.max_retries} retries: {e}")
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Digitransit timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(f"Failed to connect to Digitransit at {url}: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Digitransit network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except ValueError as e:
                    raise ValueError(f"Digitransit returned a malformed response from {url}: {e}") from e
        finally:
            client.close()

    def geocode(self, name: str) -> Coordinates:
        """Resolve a waypoint name to coordinates inside the configured search circle."""
        logger.info(f"Getting coordinates for {name}")
        params = {
            "text": name,
            "boundary.circle.lat": settings.geocoding_focus_lat,
            "boundary.circle.lon": settings.geocoding_focus_lon,
            "boundary.circle.radius": settings.geocoding_radius_km,
            "size": 1,
        }
        data = self._request("GET", self.geocoding_url, params=params)
        try:
            response = _GeocodingResponse.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Malformed geocoding response for '{name}': {e}") from e
        if not response.features:
            raise WaypointNotFoundError(name)
        lon, lat = response.features[0].geometry.coordinates
        return Coordinates(lat=lat, lon=lon)

    def plan(self, origin: Coordinates, destination: Coordinates) -> list[Itinerary]:
        """Return the candidate itineraries between two coordinates, as planned by the router."""
        query = PLAN_QUERY.format(
            from_lat=origin.lat,
            from_lon=origin.lon,
            to_lat=destination.lat,
            to_lon=destination.lon,
            num_itineraries=settings.plan_num_itineraries,
            date=settings.plan_date,
            time=settings.plan_time,
        )
        data = self._request(
            "POST",
            self.routing_url,
            content=query.encode("utf-8"),
            headers={"Content-Type": "application/graphql"},
        )
        if isinstance(data, dict) and data.get("errors"):
            raise ValueError(f"Digitransit routing query failed: {data['errors']}")
        try:
            response = _PlanResponse.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Malformed routing response: {e}") from e
        return [itinerary.to_domain() for itinerary in response.data.plan.itineraries]


def check_health(api_key: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Check that the geocoder answers a trivial query with the configured key."""
    key = api_key or settings.digitransit_api_key
    if not key:
        return False
    try:
        with httpx.Client(timeout=5.0, headers={SUBSCRIPTION_KEY_HEADER: key}, transport=transport) as client:
            response = client.get(settings.digitransit_geocoding_url, params={"text": "Helsinki", "size": 1})
            response.raise_for_status()
            return isinstance(response.json().get("features"), list)
    except (httpx.HTTPError, ValueError):
        return False
