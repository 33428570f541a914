"""Query generation request/response models."""
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from critical_path.models import CriticalPath


class AnalysisType(str, Enum):
    """Kind of diagnostic analysis a generated query performs."""
    LATENCY = "latency"
    ERRORS = "errors"
    BOTTLENECKS = "bottlenecks"
    THROUGHPUT = "throughput"
    GENERAL = "general"


class WireModel(BaseModel):
    """Base model using camelCase field names on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class QueryGenerationRequest(WireModel):
    """Caller request to turn a critical path into a diagnostic query."""
    path: CriticalPath
    analysis_goal: Optional[str] = None
    preferred_model: Optional[str] = None
    time_window_minutes: Optional[int] = Field(default=None, gt=0)
    use_managed_analyzer: bool = Field(
        default=False,
        validation_alias=AliasChoices("useManagedAnalyzer", "isClickHouseAI", "use_managed_analyzer"),
        serialization_alias="useManagedAnalyzer",
    )
    # None defers to QueryGeneratorConfig.use_evaluator_optimizer
    use_evaluator_optimizer: Optional[bool] = None


class OptimizationError(WireModel):
    """One failed attempt reported by the remote validate/optimize loop."""
    attempt: int = Field(ge=0)
    code: Optional[str] = None
    message: Optional[str] = None


class OptimizationStatus(WireModel):
    """Outcome of the remote validate/optimize loop, passed through as-is."""
    was_optimized: bool = False
    attempts: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("attempts", "evaluationCount"),
        serialization_alias="attempts",
    )
    final_valid: bool = False
    errors: List[OptimizationError] = Field(default_factory=list)


class QueryGenerationResult(WireModel):
    """Terminal artifact returned to the dashboard."""
    sql: str
    model: str
    generation_time_ms: int
    description: str
    critical_path: str
    analysis_type: AnalysisType
    optimization_status: Optional[OptimizationStatus] = None

    @property
    def is_fallback(self) -> bool:
        return self.model == "fallback"


class ValidationResult(WireModel):
    """Outcome of the static SQL safety scan."""
    valid: bool
    errors: List[str] = Field(default_factory=list)


class RemotePathDescriptor(WireModel):
    """Reduced path sent to the generation service."""
    id: str
    name: str
    services: List[str]
    start_service: str
    end_service: str


class RemoteQueryRequest(WireModel):
    """Body of the generate-query call."""
    path: RemotePathDescriptor
    analysis_goal: str
    model: Optional[str] = None
    time_window_minutes: Optional[int] = None
    is_managed_analyzer: bool = Field(default=False, alias="isClickHouseAI")
    use_evaluator_optimizer: bool = True

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class RemoteQueryResponse(WireModel):
    """Body returned by the generation service on success."""
    model_config = ConfigDict(extra="ignore")

    sql: str = Field(min_length=1)
    model: Optional[str] = None
    description: Optional[str] = None
    analysis_type: Optional[str] = None
    generation_time_ms: Optional[float] = Field(default=None, ge=0)
    optimization_status: Optional[OptimizationStatus] = None
