from datetime import datetime, timedelta, timezone

from xphora_pulse.models import Event, EventSource, EventType, Location, Severity, Trend
from xphora_pulse.strategies import citizen_engagement_score, placeholder_resolution_rate
from xphora_pulse.summarizer import AreaSummarizer, classify_trend, relative_time, summary_text

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _event(event_id, event_type=EventType.SAFETY_INCIDENT, area="Jayanagar", severity=Severity.LOW,
           hours_ago=1.0, source=EventSource.SENSOR_DATA):
    return Event(
        id=event_id,
        type=event_type,
        location=Location(lat=12.925, lng=77.5938, area=area),
        timestamp=NOW - timedelta(hours=hours_ago),
        severity=severity,
        source=source,
    )


def _summarize(areas, events):
    summarizer = AreaSummarizer(placeholder_resolution_rate, citizen_engagement_score)
    return summarizer.summarize(areas, events, NOW)


class TestTrend:
    def test_three_high_is_concerning(self):
        events = [_event(f"h{i}", severity=Severity.HIGH) for i in range(3)]
        summary, = _summarize(["Jayanagar"], events)
        assert summary.trend == Trend.CONCERNING
        assert summary.alerts == 3

    def test_one_high_is_warning(self):
        assert classify_trend([_event("h", severity=Severity.HIGH)]) == Trend.WARNING

    def test_many_quiet_events_is_positive(self):
        events = [_event(f"e{i}", severity=Severity.MEDIUM) for i in range(11)]
        summary, = _summarize(["Jayanagar"], events)
        assert summary.trend == Trend.POSITIVE
        assert summary.alerts == 0

    def test_ten_quiet_events_is_stable(self):
        assert classify_trend([_event(f"e{i}") for i in range(10)]) == Trend.STABLE


def test_empty_area_still_summarized():
    summary, = _summarize(["Whitefield"], [_event("e1")])
    assert summary.area == "Whitefield"
    assert summary.trend == Trend.STABLE
    assert summary.alerts == 0
    assert summary.key_metrics.incident_count == 0
    assert summary.last_updated == "no recent events"
    assert summary.summary.startswith("Area operating normally")


def test_window_is_last_24_hours():
    events = [_event("recent", hours_ago=23), _event("old", hours_ago=25, severity=Severity.HIGH)]
    summary, = _summarize(["Jayanagar"], events)
    assert summary.key_metrics.incident_count == 1
    assert summary.trend == Trend.STABLE


def test_summaries_follow_requested_order():
    events = [_event("a", area="A"), _event("b", area="B")]
    assert [s.area for s in _summarize(["B", "A", "C"], events)] == ["B", "A", "C"]


class TestSummaryText:
    def test_power_outages_take_precedence(self):
        events = [_event(f"p{i}", EventType.POWER_OUTAGE) for i in range(4)]
        events += [_event(f"t{i}", EventType.TRAFFIC_INCIDENT) for i in range(5)]
        assert summary_text(events) == (
            "Infrastructure stress detected. Power grid showing instability with "
            "4 outage reports. Traffic normal. Air quality moderate."
        )

    def test_traffic_congestion(self):
        events = [_event(f"t{i}", EventType.TRAFFIC_INCIDENT) for i in range(3)]
        events += [_event(f"p{i}", EventType.POWER_OUTAGE) for i in range(3)]
        assert summary_text(events).startswith("Traffic congestion above normal. 3 incidents")

    def test_normal(self):
        assert summary_text([]).startswith("Area operating normally")


def test_key_metrics_use_strategies():
    events = [_event(f"c{i}", source=EventSource.CITIZEN_REPORT) for i in range(4)]
    events.append(_event("s1"))
    summary, = _summarize(["Jayanagar"], events)
    assert summary.key_metrics.resolution_rate == 78
    assert summary.key_metrics.community_engagement == 20


def test_last_updated_uses_newest_event():
    events = [_event("a", hours_ago=5), _event("b", hours_ago=0.5)]
    summary, = _summarize(["Jayanagar"], events)
    assert summary.last_updated == "30 minutes ago"


def test_relative_time():
    assert relative_time(NOW - timedelta(minutes=5), NOW) == "5 minutes ago"
    assert relative_time(NOW - timedelta(minutes=150), NOW) == "2 hours ago"
    assert relative_time(None, NOW) == "no recent events"


def test_future_event_reads_as_just_now():
    assert relative_time(NOW + timedelta(minutes=12), NOW) == "0 minutes ago"
    summary, = _summarize(["Jayanagar"], [_event("ahead", hours_ago=-0.5)])
    assert summary.last_updated == "0 minutes ago"
    assert summary.key_metrics.incident_count == 1


def test_summary_serializes_camel_case():
    summary, = _summarize(["Jayanagar"], [_event("a")])
    data = summary.model_dump(by_alias=True, mode="json")
    assert data["lastUpdated"] == "1 hours ago"
    assert set(data["keyMetrics"]) == {"incidentCount", "resolutionRate", "communityEngagement"}
    assert data["trend"] == "stable"
