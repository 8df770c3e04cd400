import random
import uuid
from datetime import datetime, timedelta, timezone

import aiohttp
import structlog

from ..models import Event, EventSource, EventType, Location, Severity

log = structlog.get_logger()

# area -> (lat, lng, district)
BENGALURU_AREAS = {
    "HSR Layout": (12.9116, 77.6389, "Bengaluru South"),
    "Koramangala": (12.9352, 77.6245, "Bengaluru South"),
    "Indiranagar": (12.9784, 77.6408, "Bengaluru East"),
    "Whitefield": (12.9698, 77.7500, "Bengaluru East"),
    "Jayanagar": (12.9250, 77.5938, "Bengaluru South"),
}

_DESCRIPTIONS = {
    EventType.POWER_OUTAGE: ["Power cut in the block", "No electricity since morning"],
    EventType.TRAFFIC_INCIDENT: ["Slow traffic near signal", "Vehicle breakdown on main road"],
    EventType.WEATHER_EVENT: ["Heavy rain", "Thunderstorm warning"],
    EventType.INFRASTRUCTURE_ISSUE: ["Blocked drain on street", "Pothole near bus stop"],
    EventType.SAFETY_INCIDENT: ["Streetlight not working", "Fallen tree on footpath"],
}


def _jitter(rng, value, meters):
    # ~111 km per degree; good enough for a few hundred meters
    return value + rng.uniform(-meters, meters) / 111_000


def make_event(rng, event_type, area, now, max_age=timedelta(hours=3), source=None, severity=None):
    lat, lng, district = BENGALURU_AREAS[area]
    return Event(
        id=f"sim_{uuid.UUID(int=rng.getrandbits(128)).hex[:12]}",
        type=event_type,
        location=Location(
            lat=_jitter(rng, lat, 300),
            lng=_jitter(rng, lng, 300),
            area=area,
            district=district,
        ),
        timestamp=now - timedelta(seconds=rng.uniform(0, max_age.total_seconds())),
        severity=severity or rng.choice(list(Severity)),
        description=rng.choice(_DESCRIPTIONS[event_type]),
        source=source or rng.choice(list(EventSource)),
        metadata={"simulated": True},
    )


def random_events(rng, count, now=None):
    now = now or datetime.now(timezone.utc)
    areas = list(BENGALURU_AREAS)
    return [
        make_event(rng, rng.choice(list(EventType)), rng.choice(areas), now)
        for _ in range(count)
    ]


def outage_burst(rng, area, count, now=None):
    """Power outages in one area within the last two hours."""
    now = now or datetime.now(timezone.utc)
    return [
        make_event(rng, EventType.POWER_OUTAGE, area, now, max_age=timedelta(hours=2))
        for _ in range(count)
    ]


def monsoon_events(rng, area, drains=3, now=None):
    """A weather event plus drainage complaints in `area`."""
    now = now or datetime.now(timezone.utc)
    events = [make_event(rng, EventType.WEATHER_EVENT, area, now, source=EventSource.API_FEED)]
    for _ in range(drains):
        event = make_event(rng, EventType.INFRASTRUCTURE_ISSUE, area, now)
        events.append(event.model_copy(update={"description": "Blocked drain causing flooding"}))
    return events


async def post_events(target_url, events, timeout_seconds=5):
    payload = [e.model_dump(mode="json") for e in events]
    async with aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
    ) as session:
        async with session.post(f"{target_url}/events", json=payload) as response:
            body = await response.json()
            return {
                "ok": response.status < 400,
                "status_code": response.status,
                "body": body,
            }


async def run_simulation_round(target_url, batch_size, rng=None, sender=None, burst_every=0, round_index=0):
    """Send one batch of synthetic events. Send failures are reported, not raised."""
    rng = rng or random.Random()
    sender = sender or post_events
    started_at = datetime.now(timezone.utc)

    events = random_events(rng, batch_size, now=started_at)
    if burst_every and round_index % burst_every == 0:
        area = rng.choice(list(BENGALURU_AREAS))
        events.extend(outage_burst(rng, area, 4, now=started_at))

    try:
        response = await sender(target_url, events)
        ok = bool(response.get("ok"))
        error = None if ok else f"status {response.get('status_code')}"
    except Exception as e:
        ok = False
        error = str(e)

    if ok:
        log.info("simulation_round_sent", target=target_url, events=len(events), round=round_index)
    else:
        log.warning("simulation_round_failed", target=target_url, error=error, round=round_index)

    result = {
        "round": round_index,
        "status": "sent" if ok else "failed",
        "started_at": started_at.isoformat(),
        "event_count": len(events),
    }
    if error:
        result["error"] = error
    return result
