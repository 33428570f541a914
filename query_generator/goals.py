"""Analysis goal selection from critical path metrics.

Errors outrank severe latency, which outranks moderate latency, which
outranks the throughput default. The same cascade drives both the goal
handed to the generation service and the analysis type of fallback queries.
"""
from enum import Enum
from typing import Optional

from critical_path.models import PathMetrics
from query_generator.models import AnalysisType

ERROR_RATE_THRESHOLD = 0.05
BOTTLENECK_P99_MS = 2000
LATENCY_P99_MS = 1000


class AnalysisFocus(str, Enum):
    """Bucket picked by the metric threshold cascade."""
    ERRORS = "errors"
    BOTTLENECKS = "bottlenecks"
    LATENCY = "latency"
    CAPACITY = "capacity"


ANALYSIS_GOALS = {
    AnalysisFocus.ERRORS: (
        "Identify error patterns, distribution, and root causes across services "
        "to improve reliability"
    ),
    AnalysisFocus.BOTTLENECKS: (
        "Detect performance bottlenecks by finding slowest operations and their "
        "impact on the critical path"
    ),
    AnalysisFocus.LATENCY: (
        "Analyze service latency patterns showing p50, p95, p99 percentiles over "
        "time for performance monitoring"
    ),
    AnalysisFocus.CAPACITY: (
        "Measure request volume, throughput rates, and success ratios to "
        "understand system capacity"
    ),
}

_FALLBACK_TYPES = {
    AnalysisFocus.ERRORS: AnalysisType.ERRORS,
    AnalysisFocus.BOTTLENECKS: AnalysisType.BOTTLENECKS,
    AnalysisFocus.LATENCY: AnalysisType.LATENCY,
    AnalysisFocus.CAPACITY: AnalysisType.GENERAL,
}

# Checked in order against a lowercased description.
_DESCRIPTION_KEYWORDS = (
    ("error", AnalysisType.ERRORS),
    ("bottleneck", AnalysisType.BOTTLENECKS),
    ("latency", AnalysisType.LATENCY),
    ("throughput", AnalysisType.THROUGHPUT),
)


def select_focus(metrics: PathMetrics) -> AnalysisFocus:
    """Run the threshold cascade; first match wins."""
    if metrics.error_rate > ERROR_RATE_THRESHOLD:
        return AnalysisFocus.ERRORS
    if metrics.p99_latency_ms > BOTTLENECK_P99_MS:
        return AnalysisFocus.BOTTLENECKS
    if metrics.p99_latency_ms > LATENCY_P99_MS:
        return AnalysisFocus.LATENCY
    return AnalysisFocus.CAPACITY


def select_analysis_goal(metrics: PathMetrics) -> str:
    """Pick the analysis goal text sent to the generation service."""
    return ANALYSIS_GOALS[select_focus(metrics)]


def classify_analysis_type(metrics: PathMetrics) -> AnalysisType:
    """Four-bucket analysis type used for fallback queries."""
    return _FALLBACK_TYPES[select_focus(metrics)]


def infer_analysis_type(description: Optional[str]) -> AnalysisType:
    """Guess the analysis type from a generated query's description."""
    lowered = (description or "").lower()
    for keyword, analysis_type in _DESCRIPTION_KEYWORDS:
        if keyword in lowered:
            return analysis_type
    return AnalysisType.GENERAL


def coerce_analysis_type(value: Optional[str], description: Optional[str] = None) -> AnalysisType:
    """Accept a reported analysis type, inferring one when it is missing or unknown."""
    if value:
        try:
            return AnalysisType(value.strip().lower())
        except ValueError:
            pass
    return infer_analysis_type(description)
