from ..models import EventType, InsightType, PredictiveInsight, Severity
from .base import Detector, insight_id

DRAINAGE_KEYWORDS = ("drain", "flood")


def is_drainage_issue(event):
    text = event.description.lower()
    return any(word in text for word in DRAINAGE_KEYWORDS)


class SafetyRiskDetector(Detector):
    """Combines weather events with drainage complaints into waterlogging alerts."""

    name = "safety"

    async def detect(self, events, now):
        has_weather = any(e.type == EventType.WEATHER_EVENT for e in events)
        drainage = [
            e
            for e in events
            if e.type == EventType.INFRASTRUCTURE_ISSUE and is_drainage_issue(e)
        ]
        if not (has_weather and drainage):
            return []

        # exact area names here, not radius clustering
        by_area = {}
        for event in drainage:
            by_area.setdefault(event.location.area, []).append(event)

        insights = []
        for area, issues in by_area.items():
            insights.append(
                PredictiveInsight(
                    id=insight_id("safety", area, now),
                    type=InsightType.SAFETY_ALERT,
                    title="Waterlogging Risk Assessment",
                    description=(
                        f"Heavy rain forecast + blocked drains in {area} "
                        f"({len(issues)} reports) indicate high flooding probability "
                        "in low-lying areas."
                    ),
                    confidence=82,
                    severity=Severity.HIGH,
                    timeframe="Next 6 hours",
                    affected_area=area,
                    event_count=len(issues),
                    pattern="Drainage system stress",
                    recommendation=f"Avoid low-lying areas in {area}. BBMP drainage teams deployed.",
                    sources=["Weather API", "Drainage reports", "Topographical data"],
                    ai_reasoning="Rainfall intensity exceeds drainage capacity in reported areas.",
                    related_events=[e.id for e in issues],
                )
            )
        return insights
