from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from xphora_pulse.config import Config
from xphora_pulse.engine import InsightsEngine
from xphora_pulse.feeds import StaticUpcomingEventsFeed
from xphora_pulse.services.insights import InsightsService

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _build_client(monkeypatch):
    monkeypatch.setenv("DEFAULT_AREAS", "")
    engine = InsightsEngine(upcoming_feed=StaticUpcomingEventsFeed([]), clock=lambda: NOW)
    return TestClient(InsightsService(Config(), engine).app)


def _report(report_id, category, description, minutes_ago, tags=()):
    return {
        "id": report_id,
        "location": {"lat": 12.9352, "lng": 77.6245, "area": "Koramangala"},
        "analysis": {
            "category": category,
            "severity": "high",
            "description": description,
            "tags": list(tags),
        },
        "timestamp": (NOW - timedelta(minutes=minutes_ago)).isoformat(),
    }


def test_reports_flow_into_insights_and_summaries(monkeypatch):
    client = _build_client(monkeypatch)

    reports = [
        _report("p1", "infrastructure", "Power cut", 90, tags=["outage"]),
        _report("p2", "infrastructure", "No electricity", 60),
        _report("p3", "infrastructure", "Transformer blew, power gone", 30),
        _report("p4", "infrastructure", "Power outage again", 10),
        _report("w1", "weather", "Heavy rain", 20),
        _report("d1", "infrastructure", "Drain overflowing onto road", 15),
    ]
    for report in reports:
        assert client.post("/reports", json=report).status_code == 200

    insights = client.post("/analyze", json=[]).json()
    by_type = {i["type"]: i for i in insights}
    assert set(by_type) == {"infrastructure_pattern", "safety_alert"}
    assert by_type["infrastructure_pattern"]["eventCount"] == 4
    assert by_type["infrastructure_pattern"]["confidence"] == 92
    assert by_type["safety_alert"]["relatedEvents"] == ["d1"]
    assert [i["confidence"] for i in insights] == [92, 82]

    summary, = client.get("/summaries", params={"area": "Koramangala"}).json()
    assert summary["trend"] == "concerning"
    assert summary["alerts"] == 6
    assert summary["summary"].startswith("Infrastructure stress detected")
    assert summary["keyMetrics"]["communityEngagement"] == 30
    assert summary["lastUpdated"] == "10 minutes ago"
