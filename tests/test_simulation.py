import asyncio
import random
from datetime import datetime, timezone

from xphora_pulse.detectors import InfrastructurePatternDetector, SafetyRiskDetector
from xphora_pulse.models import EventType
from xphora_pulse.services.simulation import (
    BENGALURU_AREAS,
    monsoon_events,
    outage_burst,
    random_events,
    run_simulation_round,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def test_random_events_are_seeded():
    first = random_events(random.Random(7), 10, now=NOW)
    second = random_events(random.Random(7), 10, now=NOW)
    assert [e.id for e in first] == [e.id for e in second]
    assert all(e.location.area in BENGALURU_AREAS for e in first)


def test_outage_burst_triggers_infrastructure_pattern():
    events = outage_burst(random.Random(1), "HSR Layout", 4, now=NOW)
    insights = asyncio.run(InfrastructurePatternDetector().detect(events, NOW))
    assert len(insights) == 1
    assert insights[0].event_count == 4


def test_monsoon_events_trigger_safety_alert():
    events = monsoon_events(random.Random(3), "Koramangala", drains=2, now=NOW)
    assert events[0].type == EventType.WEATHER_EVENT
    insights = asyncio.run(SafetyRiskDetector().detect(events, NOW))
    assert [i.affected_area for i in insights] == ["Koramangala"]
    assert insights[0].event_count == 2


def test_round_sends_batch_with_burst():
    sent = []

    async def fake_sender(target, events):
        sent.append((target, events))
        return {"ok": True, "status_code": 200, "body": {"status": "accepted"}}

    result = asyncio.run(
        run_simulation_round(
            "http://pulse:8000",
            3,
            rng=random.Random(5),
            sender=fake_sender,
            burst_every=2,
            round_index=0,
        )
    )

    assert result["status"] == "sent"
    assert result["event_count"] == 7
    assert sent[0][0] == "http://pulse:8000"
    assert len(sent[0][1]) == 7


def test_round_reports_send_failure():
    async def failing_sender(target, events):
        raise RuntimeError("connection refused")

    result = asyncio.run(
        run_simulation_round("http://pulse:8000", 2, rng=random.Random(5), sender=failing_sender)
    )
    assert result["status"] == "failed"
    assert result["error"] == "connection refused"
