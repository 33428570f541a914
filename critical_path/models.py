"""Critical path data models handed over by the topology layer."""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PathPriority(str, Enum):
    """Priority assigned to a critical path during discovery."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PathEdge(BaseModel):
    """Directed call edge between two services on the path."""
    model_config = ConfigDict(frozen=True)

    source: str
    target: str


class PathMetrics(BaseModel):
    """Aggregate RED metrics for a critical path."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    request_count: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("requestCount", "request_count"),
        serialization_alias="requestCount",
    )
    avg_latency_ms: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("avgLatency", "avgLatencyMs", "avg_latency_ms"),
        serialization_alias="avgLatency",
    )
    error_rate: float = Field(
        default=0.0,
        ge=0,
        le=1,
        validation_alias=AliasChoices("errorRate", "error_rate"),
        serialization_alias="errorRate",
    )
    p99_latency_ms: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("p99Latency", "p99LatencyMs", "p99_latency_ms"),
        serialization_alias="p99Latency",
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CriticalPath(BaseModel):
    """A set of services and call edges identified as high impact."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    services: List[str] = Field(min_length=1)
    edges: List[PathEdge] = Field(default_factory=list)
    metrics: PathMetrics = Field(default_factory=PathMetrics)
    priority: PathPriority = PathPriority.MEDIUM
    last_updated: datetime = Field(
        default_factory=_utcnow,
        validation_alias=AliasChoices("lastUpdated", "last_updated"),
        serialization_alias="lastUpdated",
    )

    @property
    def start_service(self) -> str:
        return self.services[0]

    @property
    def end_service(self) -> str:
        return self.services[-1]
