import asyncio

import pytest

from xphora_pulse import feeds as feeds_module
from xphora_pulse.feeds import (
    HttpUpcomingEventsFeed,
    StaticTrafficImpactLookup,
    StaticUpcomingEventsFeed,
)
from xphora_pulse.models import GeoPoint


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise RuntimeError(f"HTTP {self.status}")

    async def json(self):
        return self._payload


class FakeResponseContext:
    def __init__(self, response):
        self.response = response

    async def __aenter__(self):
        return self.response

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeClientSession:
    def __init__(self, responses, timeout=None):
        self.responses = responses
        self.timeout = timeout
        self.requested = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def get(self, url):
        self.requested.append(url)
        return FakeResponseContext(self.responses[url])


def test_static_feed_default_event():
    events = asyncio.run(StaticUpcomingEventsFeed().get_upcoming_events())
    assert [e.id for e in events] == ["concert_palace_grounds"]
    assert events[0].affected_routes == ["Outer Ring Road", "Hebbal-Marathahalli"]


def test_static_lookup_constant():
    lookup = StaticTrafficImpactLookup()
    impact = asyncio.run(lookup.get_historical_traffic_impact("concert", GeoPoint(lat=13.0, lng=77.5)))
    assert impact.confidence == 87
    assert impact.increase == 40


def test_http_feed_parses_events(monkeypatch):
    payload = [
        {
            "id": "ipl_final",
            "name": "IPL Final",
            "type": "sports",
            "location": {"lat": 12.9788, "lng": 77.5996},
            "timeframe": "Sunday 7:30 PM",
            "affectedRoutes": ["MG Road", "Queens Road"],
        }
    ]
    sessions = []

    def make_session(timeout=None):
        session = FakeClientSession(
            {"http://calendar:9000/events/upcoming": FakeResponse(payload)}, timeout=timeout
        )
        sessions.append(session)
        return session

    monkeypatch.setattr(feeds_module.aiohttp, "ClientSession", make_session)

    feed = HttpUpcomingEventsFeed("http://calendar:9000/", timeout_seconds=3)
    events = asyncio.run(feed.get_upcoming_events())

    assert [e.id for e in events] == ["ipl_final"]
    assert events[0].affected_routes == ["MG Road", "Queens Road"]
    assert sessions[0].timeout.total == 3
    assert sessions[0].requested == ["http://calendar:9000/events/upcoming"]


def test_http_feed_errors_propagate(monkeypatch):
    monkeypatch.setattr(
        feeds_module.aiohttp,
        "ClientSession",
        lambda timeout=None: FakeClientSession(
            {"http://calendar/events/upcoming": FakeResponse({}, status=503)}, timeout=timeout
        ),
    )
    with pytest.raises(RuntimeError, match="503"):
        asyncio.run(HttpUpcomingEventsFeed("http://calendar").get_upcoming_events())
