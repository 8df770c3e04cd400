import uuid
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class EventType(str, Enum):
    """Kind of city event held in the analysis buffer."""

    POWER_OUTAGE = "power_outage"
    TRAFFIC_INCIDENT = "traffic_incident"
    WEATHER_EVENT = "weather_event"
    INFRASTRUCTURE_ISSUE = "infrastructure_issue"
    SAFETY_INCIDENT = "safety_incident"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EventSource(str, Enum):
    """Provenance of an event: who or what observed it."""

    CITIZEN_REPORT = "citizen_report"
    SENSOR_DATA = "sensor_data"
    API_FEED = "api_feed"
    SOCIAL_MEDIA = "social_media"


class InsightType(str, Enum):
    INFRASTRUCTURE_PATTERN = "infrastructure_pattern"
    TRAFFIC_PREDICTION = "traffic_prediction"
    SAFETY_ALERT = "safety_alert"
    COMMUNITY_TREND = "community_trend"


class Trend(str, Enum):
    POSITIVE = "positive"
    STABLE = "stable"
    WARNING = "warning"
    CONCERNING = "concerning"


class GeoPoint(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Location(GeoPoint):
    """Where an event happened. `area` is the human-readable cluster name."""

    area: str = Field(min_length=1)
    district: str = ""


class Event(BaseModel):
    """An observation ingested into the analysis buffer.

    Events are frozen: the buffer only appends and evicts them, it never
    mutates one. `metadata` is an open bag for detector-specific fields, so
    detectors must check for a key before relying on it. It is stored
    read-only (nested dicts as mapping proxies, lists as tuples) and dumps
    back to plain dicts and lists.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: EventType
    location: Location
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    severity: Severity
    description: str = ""
    source: EventSource
    metadata: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # naive timestamps are treated as UTC so they compare with aware ones
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("metadata")
    @classmethod
    def _freeze_metadata(cls, value):
        return _freeze(value)

    @field_serializer("metadata")
    def _dump_metadata(self, value):
        return _thaw(value)


def _freeze(value):
    # read-only all the way down: mappings become proxies, lists become tuples
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    return value


def _thaw(value):
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (tuple, frozenset)):
        return [_thaw(v) for v in value]
    return value


class PredictiveInsight(BaseModel):
    """A scored pattern or prediction produced by one detector pass.

    Serialized with camelCase keys (`model_dump(by_alias=True)`).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: InsightType
    title: str
    description: str
    confidence: int = Field(ge=0, le=100)
    severity: Severity
    timeframe: str
    affected_area: str = Field(alias="affectedArea")
    event_count: int = Field(alias="eventCount", ge=0)
    pattern: str
    recommendation: str
    sources: List[str] = Field(default_factory=list)
    ai_reasoning: str = Field(alias="aiReasoning")
    related_events: List[str] = Field(default_factory=list, alias="relatedEvents")


class KeyMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    incident_count: int = Field(alias="incidentCount")
    resolution_rate: float = Field(alias="resolutionRate")
    community_engagement: float = Field(alias="communityEngagement")


class AreaSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    area: str
    summary: str
    alerts: int
    trend: Trend
    last_updated: str = Field(alias="lastUpdated")
    key_metrics: KeyMetrics = Field(alias="keyMetrics")


class UpcomingEvent(BaseModel):
    """A scheduled public event (concert, match, rally) from the calendar feed."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    type: str
    location: GeoPoint
    timeframe: str
    affected_routes: List[str] = Field(default_factory=list, alias="affectedRoutes")


class TrafficImpact(BaseModel):
    """Historical traffic impact of a kind of event at a place."""

    confidence: float = Field(ge=0, le=100)
    increase: float


class BufferStatus(BaseModel):
    size: int
    capacity: int
    evicted_total: int
    oldest_event_id: Optional[str] = None
    newest_event_id: Optional[str] = None
