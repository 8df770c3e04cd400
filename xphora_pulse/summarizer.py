"""
Per-area digests over the last 24 hours of buffered events.

The summary text is chosen from a small decision table on event counts;
nothing here is generated by a model.
"""

from datetime import timedelta

from .models import AreaSummary, EventType, KeyMetrics, Severity, Trend

WINDOW = timedelta(hours=24)

INFRASTRUCTURE_STRESS = (
    "Infrastructure stress detected. Power grid showing instability with "
    "{power} outage reports. Traffic normal. Air quality moderate."
)
TRAFFIC_CONGESTION = (
    "Traffic congestion above normal. {traffic} incidents reported. "
    "Infrastructure stable."
)
OPERATING_NORMALLY = (
    "Area operating normally. Minor incidents reported. Community engagement good."
)


def summary_text(events):
    power = sum(1 for e in events if e.type == EventType.POWER_OUTAGE)
    traffic = sum(1 for e in events if e.type == EventType.TRAFFIC_INCIDENT)

    if power > 3:
        return INFRASTRUCTURE_STRESS.format(power=power)
    if traffic > 2:
        return TRAFFIC_CONGESTION.format(traffic=traffic)
    return OPERATING_NORMALLY


def classify_trend(events):
    high = sum(1 for e in events if e.severity == Severity.HIGH)
    if high > 2:
        return Trend.CONCERNING
    if high > 0:
        return Trend.WARNING
    if len(events) > 10:
        return Trend.POSITIVE
    return Trend.STABLE


def relative_time(timestamp, now):
    if timestamp is None:
        return "no recent events"
    # future-dated events read as "0 minutes ago"
    minutes = max(0, int((now - timestamp).total_seconds() // 60))
    if minutes < 60:
        return f"{minutes} minutes ago"
    return f"{minutes // 60} hours ago"


class AreaSummarizer:
    def __init__(self, resolution_rate, engagement_score):
        self.resolution_rate = resolution_rate
        self.engagement_score = engagement_score

    def summarize(self, areas, events, now):
        summaries = []
        for area in areas:
            recent = [
                e
                for e in events
                if e.location.area == area and now - e.timestamp < WINDOW
            ]
            newest = max((e.timestamp for e in recent), default=None)

            summaries.append(
                AreaSummary(
                    area=area,
                    summary=summary_text(recent),
                    alerts=sum(1 for e in recent if e.severity == Severity.HIGH),
                    trend=classify_trend(recent),
                    last_updated=relative_time(newest, now),
                    key_metrics=KeyMetrics(
                        incident_count=len(recent),
                        resolution_rate=self.resolution_rate(recent),
                        community_engagement=self.engagement_score(recent),
                    ),
                )
            )
        return summaries
