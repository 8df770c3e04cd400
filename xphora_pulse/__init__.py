from .buffer import EventBuffer
from .engine import InsightsEngine
from .models import (
    AreaSummary,
    Event,
    EventSource,
    EventType,
    InsightType,
    Location,
    PredictiveInsight,
    Severity,
    Trend,
)

__all__ = [
    "AreaSummary",
    "Event",
    "EventBuffer",
    "EventSource",
    "EventType",
    "InsightType",
    "InsightsEngine",
    "Location",
    "PredictiveInsight",
    "Severity",
    "Trend",
]
