import asyncio

import structlog

from ..models import InsightType, PredictiveInsight, Severity
from .base import Detector, insight_id

log = structlog.get_logger()

MIN_HISTORICAL_CONFIDENCE = 70
HIGH_IMPACT_INCREASE = 40


class TrafficPredictionDetector(Detector):
    """
    Predicts congestion from scheduled public events.

    Does not read the buffer. Each collaborator call is bounded by `timeout`
    seconds; a timeout means no insight for that call. Any other collaborator
    error propagates.
    """

    name = "traffic"

    def __init__(self, feed, impact_lookup, timeout=2.0):
        self.feed = feed
        self.impact_lookup = impact_lookup
        self.timeout = timeout

    async def detect(self, events, now):
        try:
            upcoming = await asyncio.wait_for(
                self.feed.get_upcoming_events(), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            log.warning("collaborator_timeout", collaborator="upcoming_events", timeout=self.timeout)
            return []

        insights = []
        for event in upcoming:
            try:
                impact = await asyncio.wait_for(
                    self.impact_lookup.get_historical_traffic_impact(event.type, event.location),
                    timeout=self.timeout,
                )
            except asyncio.TimeoutError:
                log.warning(
                    "collaborator_timeout",
                    collaborator="traffic_impact",
                    upcoming_event=event.id,
                    timeout=self.timeout,
                )
                continue

            if impact.confidence <= MIN_HISTORICAL_CONFIDENCE:
                continue

            routes = ", ".join(event.affected_routes)
            increase = _format_percent(impact.increase)
            insights.append(
                PredictiveInsight(
                    id=insight_id("traffic", event.id, now),
                    type=InsightType.TRAFFIC_PREDICTION,
                    title="Unusual Traffic Buildup Predicted",
                    description=(
                        f"{event.name} will likely cause {increase}% increase in "
                        f"traffic on {routes}."
                    ),
                    confidence=round(impact.confidence),
                    severity=Severity.HIGH if impact.increase > HIGH_IMPACT_INCREASE else Severity.MEDIUM,
                    timeframe=event.timeframe,
                    affected_area=routes,
                    event_count=1,
                    pattern="Event-driven congestion",
                    recommendation="Use alternative routes. Metro recommended for event area.",
                    sources=["Event calendar", "Historical traffic data", "Social media"],
                    ai_reasoning=(
                        f"Similar events historically increased travel time by "
                        f"{increase}% on this route."
                    ),
                    related_events=[event.id],
                )
            )

        return insights


def _format_percent(value):
    return str(int(value)) if float(value).is_integer() else f"{value:g}"
