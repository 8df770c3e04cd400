"""
Conversion of citizen reports, as stored by the reporting flow after media
classification, into buffer events.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .errors import ReportConversionError
from .models import Event, EventSource, EventType, GeoPoint, Location, Severity

POWER_KEYWORDS = ("power", "outage", "electricity", "blackout")


class ReportSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ReportStatus(str, Enum):
    PENDING = "pending"
    ANALYZED = "analyzed"
    VERIFIED = "verified"
    RESOLVED = "resolved"


class ReportLocation(GeoPoint):
    address: Optional[str] = None
    area: str = Field(min_length=1)
    district: str = ""


class ReportAnalysis(BaseModel):
    """Classification attached to a report's photo or video."""

    category: str
    severity: ReportSeverity
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    confidence: float = Field(default=0, ge=0, le=100)


class CitizenReport(BaseModel):
    id: str
    user_id: str = ""
    location: ReportLocation
    analysis: ReportAnalysis
    user_comments: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: ReportStatus = ReportStatus.ANALYZED


_CATEGORY_TYPES = {
    "traffic": EventType.TRAFFIC_INCIDENT,
    "infrastructure": EventType.INFRASTRUCTURE_ISSUE,
    "weather": EventType.WEATHER_EVENT,
    "emergency": EventType.SAFETY_INCIDENT,
}


def _event_type(analysis):
    category = analysis.category.strip().lower()
    event_type = _CATEGORY_TYPES.get(category)
    if event_type == EventType.INFRASTRUCTURE_ISSUE:
        text = " ".join([analysis.description, *analysis.tags]).lower()
        if any(word in text for word in POWER_KEYWORDS):
            return EventType.POWER_OUTAGE
    return event_type


def event_from_report(report):
    """Build a citizen_report event from a classified report.

    Raises ReportConversionError for categories with no event type
    ("event", "other", or anything unknown).
    """
    event_type = _event_type(report.analysis)
    if event_type is None:
        raise ReportConversionError(report.analysis.category, report_id=report.id)

    severity = report.analysis.severity.value
    if severity == ReportSeverity.CRITICAL.value:
        severity = Severity.HIGH.value

    description = report.analysis.description
    if report.user_comments:
        description = f"{description} {report.user_comments}".strip()

    return Event(
        id=report.id,
        type=event_type,
        location=Location(
            lat=report.location.lat,
            lng=report.location.lng,
            area=report.location.area,
            district=report.location.district,
        ),
        timestamp=report.timestamp,
        severity=severity,
        description=description,
        source=EventSource.CITIZEN_REPORT,
        metadata={
            "report_status": report.status.value,
            "category": report.analysis.category,
            "tags": list(report.analysis.tags),
            "classification_confidence": report.analysis.confidence,
            "original_severity": report.analysis.severity.value,
        },
    )
