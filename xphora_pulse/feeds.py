"""
Collaborators consumed by the traffic detector: the upcoming-events calendar
and the historical traffic impact lookup.
"""

from typing import List, Protocol

import aiohttp
import structlog

from .models import GeoPoint, TrafficImpact, UpcomingEvent

log = structlog.get_logger()


class UpcomingEventsFeed(Protocol):
    async def get_upcoming_events(self) -> List[UpcomingEvent]: ...


class TrafficImpactLookup(Protocol):
    async def get_historical_traffic_impact(
        self, event_type: str, location: GeoPoint
    ) -> TrafficImpact: ...


PALACE_GROUNDS_CONCERT = UpcomingEvent(
    id="concert_palace_grounds",
    name="Concert at Palace Grounds",
    type="entertainment",
    location=GeoPoint(lat=13.0067, lng=77.5667),
    timeframe="Today 8:00-11:00 PM",
    affected_routes=["Outer Ring Road", "Hebbal-Marathahalli"],
)


class StaticUpcomingEventsFeed:
    """Fixed calendar, used when no events API is configured."""

    def __init__(self, events=None):
        self.events = list(events) if events is not None else [PALACE_GROUNDS_CONCERT]

    async def get_upcoming_events(self):
        return list(self.events)


class StaticTrafficImpactLookup:
    """Returns the same impact estimate for every event type and location."""

    def __init__(self, confidence=87, increase=40):
        self.impact = TrafficImpact(confidence=confidence, increase=increase)

    async def get_historical_traffic_impact(self, event_type, location):
        return self.impact


class HttpUpcomingEventsFeed:
    """
    Reads upcoming events from an HTTP calendar service.

    Expects `GET {base_url}/events/upcoming` to return a JSON list of
    objects with the `UpcomingEvent` fields (camelCase `affectedRoutes`).
    HTTP and parse errors propagate to the caller.
    """

    def __init__(self, base_url, timeout_seconds=5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def get_upcoming_events(self):
        url = f"{self.base_url}/events/upcoming"
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                body = await response.json()

        events = [UpcomingEvent.model_validate(item) for item in body]
        log.debug("upcoming_events_fetched", url=url, count=len(events))
        return events
