"""
Pluggable metric functions used by the community detector and the area
summarizer.

The defaults are placeholders: accuracy and resolution rates are constants
and engagement is a plain count of citizen reports. Pass real implementations
to `InsightsEngine` to replace them without touching the detectors.
"""

from datetime import timedelta
from typing import Callable, Sequence

from .geo import haversine_distance
from .models import Event, EventSource

MetricStrategy = Callable[[Sequence[Event]], float]

PLACEHOLDER_ACCURACY_RATE = 85
PLACEHOLDER_RESOLUTION_RATE = 78


def placeholder_accuracy_rate(reports):
    return PLACEHOLDER_ACCURACY_RATE


def placeholder_resolution_rate(events):
    return PLACEHOLDER_RESOLUTION_RATE


def citizen_engagement_score(events):
    """5 points per citizen report, capped at 100."""
    citizen_reports = sum(1 for e in events if e.source == EventSource.CITIZEN_REPORT)
    return min(100, citizen_reports * 5)


def corroborated_accuracy_rate(
    reports,
    corroborating,
    radius_meters=1000,
    window=timedelta(hours=2),
):
    """
    Percentage of citizen reports backed by a non-citizen event of the same
    type within `radius_meters` and `window` of the report.

    Returns 0 when there are no reports.
    """
    reports = list(reports)
    if not reports:
        return 0.0

    others = [e for e in corroborating if e.source != EventSource.CITIZEN_REPORT]
    confirmed = 0
    for report in reports:
        for other in others:
            if other.type != report.type:
                continue
            if abs(other.timestamp - report.timestamp) > window:
                continue
            distance = haversine_distance(
                report.location.lat,
                report.location.lng,
                other.location.lat,
                other.location.lng,
            )
            if distance <= radius_meters:
                confirmed += 1
                break

    return round(confirmed * 100 / len(reports), 1)


def corroboration_strategy(snapshot_provider, radius_meters=1000, window=timedelta(hours=2)):
    """Wrap `corroborated_accuracy_rate` as an accuracy strategy.

    `snapshot_provider` is called on every evaluation, usually
    `engine.snapshot`, so the strategy sees the same buffer as the detector.
    """

    def strategy(reports):
        return corroborated_accuracy_rate(
            reports, snapshot_provider(), radius_meters=radius_meters, window=window
        )

    return strategy
