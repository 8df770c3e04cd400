"""
Insights engine: one event buffer shared by four pattern detectors and the
area summarizer.

The engine is a plain object. Callers decide its lifetime (one per process,
per tenant, per test) and hand it around explicitly.
"""

from datetime import datetime, timezone

import structlog

from .buffer import DEFAULT_CAPACITY, EventBuffer
from .detectors import (
    CommunityTrendDetector,
    InfrastructurePatternDetector,
    SafetyRiskDetector,
    TrafficPredictionDetector,
)
from .feeds import HttpUpcomingEventsFeed, StaticTrafficImpactLookup, StaticUpcomingEventsFeed
from .models import Event
from .strategies import (
    citizen_engagement_score,
    placeholder_accuracy_rate,
    placeholder_resolution_rate,
)
from .summarizer import AreaSummarizer

log = structlog.get_logger()


def _utcnow():
    return datetime.now(timezone.utc)


class InsightsEngine:
    """
    Turns a stream of city events into scored insights and area digests.

    Collaborators and metric strategies are injectable; anything left as None
    falls back to the static/placeholder default.
    """

    def __init__(
        self,
        buffer=None,
        upcoming_feed=None,
        impact_lookup=None,
        accuracy_rate=None,
        resolution_rate=None,
        engagement_score=None,
        clock=None,
        collaborator_timeout=2.0,
    ):
        self.buffer = buffer if buffer is not None else EventBuffer(DEFAULT_CAPACITY)
        self.clock = clock or _utcnow

        self.infrastructure = InfrastructurePatternDetector()
        self.traffic = TrafficPredictionDetector(
            upcoming_feed or StaticUpcomingEventsFeed(),
            impact_lookup or StaticTrafficImpactLookup(),
            timeout=collaborator_timeout,
        )
        self.safety = SafetyRiskDetector()
        self.community = CommunityTrendDetector(accuracy_rate or placeholder_accuracy_rate)
        self.detectors = [self.infrastructure, self.traffic, self.safety, self.community]

        self.summarizer = AreaSummarizer(
            resolution_rate or placeholder_resolution_rate,
            engagement_score or citizen_engagement_score,
        )

    @classmethod
    def from_config(cls, config, **overrides):
        feed = None
        if config.upcoming_events_url:
            feed = HttpUpcomingEventsFeed(
                config.upcoming_events_url,
                timeout_seconds=config.collaborator_timeout,
            )
        kwargs = {
            "buffer": EventBuffer(config.buffer_capacity),
            "upcoming_feed": feed,
            "collaborator_timeout": config.collaborator_timeout,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    def ingest(self, events):
        """Buffer a batch of events; returns how many old events were evicted.

        Items that are not `Event` instances are validated first. One bad
        item raises `pydantic.ValidationError` and nothing is buffered.
        """
        events = [e if isinstance(e, Event) else Event.model_validate(e) for e in events]
        evicted = self.buffer.ingest(events)
        if events:
            log.info(
                "events_ingested",
                count=len(events),
                evicted=evicted,
                buffer_size=len(self.buffer),
            )
        return evicted

    def snapshot(self):
        return self.buffer.snapshot()

    async def analyze_event_streams(self, new_events=()):
        """Ingest `new_events`, then run every detector over the buffer.

        Returns insights sorted by confidence, highest first. Ties keep
        detector order.
        """
        self.ingest(new_events)
        events = self.snapshot()
        now = self.clock()

        insights = []
        counts = {}
        for detector in self.detectors:
            found = await detector.detect(events, now)
            counts[detector.name] = len(found)
            insights.extend(found)

        insights.sort(key=lambda insight: insight.confidence, reverse=True)
        log.info(
            "analysis_completed",
            buffer_size=len(events),
            insights=len(insights),
            by_detector=counts,
        )
        return insights

    async def detect_infrastructure_patterns(self):
        return await self.infrastructure.detect(self.snapshot(), self.clock())

    async def predict_traffic_patterns(self):
        return await self.traffic.detect(self.snapshot(), self.clock())

    async def assess_safety_risks(self):
        return await self.safety.detect(self.snapshot(), self.clock())

    async def analyze_community_trends(self):
        return await self.community.detect(self.snapshot(), self.clock())

    def generate_area_summaries(self, areas):
        summaries = self.summarizer.summarize(list(areas), self.snapshot(), self.clock())
        log.debug("area_summaries_generated", areas=len(summaries))
        return summaries
