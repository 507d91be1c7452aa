import json

import httpx
import pytest

from tour_optimizer.models.domain import Coordinates
from tour_optimizer.services.digitransit.client import (
    SUBSCRIPTION_KEY_HEADER,
    DigitransitClient,
    WaypointNotFoundError,
    check_health,
)

PLAN_PAYLOAD = {
    "data": {
        "plan": {
            "itineraries": [
                {
                    "duration": 1500,
                    "walkDistance": 420.5,
                    "legs": [
                        {"mode": "WALK", "duration": 300, "distance": 420.5, "trip": None, "transitLeg": False},
                        {
                            "mode": "BUS",
                            "duration": 1000,
                            "distance": 5400.0,
                            "transitLeg": True,
                            "trip": {"route": {"shortName": "550"}},
                        },
                    ],
                }
            ]
        }
    }
}


def _client(handler, **kwargs) -> DigitransitClient:
    return DigitransitClient(
        api_key="secret",
        transport=httpx.MockTransport(handler),
        backoff_seconds=0.0,
        **kwargs,
    )


def test_requires_api_key(monkeypatch):
    from tour_optimizer.services.digitransit import client as client_module

    monkeypatch.setattr(client_module.settings, "digitransit_api_key", None)

    with pytest.raises(ValueError, match="API key"):
        DigitransitClient()


def test_geocode_returns_lat_lon_and_sends_key():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"features": [{"geometry": {"coordinates": [24.93, 60.17]}}]})

    coords = _client(handler).geocode("Kamppi")

    assert coords == Coordinates(lat=60.17, lon=24.93)
    assert requests[0].headers[SUBSCRIPTION_KEY_HEADER] == "secret"
    assert requests[0].url.params["text"] == "Kamppi"
    assert requests[0].url.params["size"] == "1"


def test_geocode_without_features_raises_not_found():
    client = _client(lambda request: httpx.Response(200, json={"features": []}))

    with pytest.raises(WaypointNotFoundError, match="Nowhere"):
        client.geocode("Nowhere")


def test_geocode_malformed_response():
    client = _client(lambda request: httpx.Response(200, json={"unexpected": True}))

    with pytest.raises(ValueError, match="Malformed geocoding response"):
        client.geocode("Kamppi")


def test_plan_parses_itineraries():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content.decode("utf-8"))
        assert request.headers["Content-Type"] == "application/graphql"
        return httpx.Response(200, json=PLAN_PAYLOAD)

    itineraries = _client(handler).plan(Coordinates(60.17, 24.93), Coordinates(60.2, 24.95))

    assert len(itineraries) == 1
    itinerary = itineraries[0]
    assert itinerary.duration == 1500
    assert itinerary.walk_distance == 420.5
    assert [leg.mode for leg in itinerary.legs] == ["WALK", "BUS"]
    assert itinerary.legs[1].trip == "550"
    assert "from: {lat: 60.17, lon: 24.93}" in bodies[0]
    assert "numItineraries: 5" in bodies[0]


def test_plan_graphql_errors_raise():
    client = _client(lambda request: httpx.Response(200, json={"errors": [{"message": "bad"}]}))

    with pytest.raises(ValueError, match="routing query failed"):
        client.plan(Coordinates(0, 0), Coordinates(1, 1))


def test_unauthorized_is_reported_without_retry():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(401)

    with pytest.raises(ValueError, match="subscription key"):
        _client(handler, max_retries=3).geocode("Kamppi")
    assert len(calls) == 1


def test_server_errors_are_retried():
    responses = iter([httpx.Response(503), httpx.Response(200, json={"features": [{"geometry": {"coordinates": [1, 2]}}]})])

    coords = _client(lambda request: next(responses), max_retries=2).geocode("Kamppi")

    assert coords == Coordinates(lat=2, lon=1)


def test_network_errors_become_connection_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ConnectionError, match="Failed to connect"):
        _client(handler, max_retries=1).geocode("Kamppi")


def test_invalid_json_is_malformed():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))

    with pytest.raises(ValueError, match="malformed response"):
        client.geocode("Kamppi")


def test_check_health():
    ok = httpx.MockTransport(lambda request: httpx.Response(200, json={"features": []}))
    down = httpx.MockTransport(lambda request: httpx.Response(500))

    assert check_health(api_key="secret", transport=ok)
    assert not check_health(api_key="secret", transport=down)


def test_check_health_without_key(monkeypatch):
    from tour_optimizer.services.digitransit import client as client_module

    monkeypatch.setattr(client_module.settings, "digitransit_api_key", None)

    assert not check_health()
