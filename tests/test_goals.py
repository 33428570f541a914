import pytest

from critical_path.models import PathMetrics
from query_generator.goals import (
    ANALYSIS_GOALS,
    AnalysisFocus,
    classify_analysis_type,
    coerce_analysis_type,
    infer_analysis_type,
    select_analysis_goal,
    select_focus,
)
from query_generator.models import AnalysisType


def metrics(error_rate=0.0, p99=0.0):
    return PathMetrics(errorRate=error_rate, p99Latency=p99)


@pytest.mark.parametrize("p99", [0, 900, 1500, 2500, 10000])
def test_errors_outrank_any_latency(p99):
    m = metrics(error_rate=0.06, p99=p99)
    assert select_focus(m) == AnalysisFocus.ERRORS
    assert classify_analysis_type(m) == AnalysisType.ERRORS
    assert "error patterns" in select_analysis_goal(m)


@pytest.mark.parametrize("error_rate", [0.0, 0.01, 0.05])
def test_severe_latency_is_bottleneck_when_errors_are_low(error_rate):
    m = metrics(error_rate=error_rate, p99=2001)
    assert classify_analysis_type(m) == AnalysisType.BOTTLENECKS
    assert select_analysis_goal(m) == ANALYSIS_GOALS[AnalysisFocus.BOTTLENECKS]


def test_moderate_latency_is_latency():
    assert classify_analysis_type(metrics(p99=1001)) == AnalysisType.LATENCY
    assert "p50, p95, p99" in select_analysis_goal(metrics(p99=2000))


def test_thresholds_are_strict():
    assert classify_analysis_type(metrics(error_rate=0.05, p99=1000)) == AnalysisType.GENERAL


def test_healthy_path_gets_capacity_goal_and_general_type():
    m = metrics(error_rate=0.001, p99=200)
    assert "throughput" in select_analysis_goal(m)
    assert classify_analysis_type(m) == AnalysisType.GENERAL


@pytest.mark.parametrize(
    "description,expected",
    [
        ("Error distribution by service", AnalysisType.ERRORS),
        ("Find the bottleneck operations", AnalysisType.BOTTLENECKS),
        ("P99 latency over time", AnalysisType.LATENCY),
        ("Throughput per minute", AnalysisType.THROUGHPUT),
        ("Overview", AnalysisType.GENERAL),
        (None, AnalysisType.GENERAL),
    ],
)
def test_infer_analysis_type_from_description(description, expected):
    assert infer_analysis_type(description) == expected


def test_coerce_prefers_reported_type_and_ignores_unknown_values():
    assert coerce_analysis_type("Latency", "error heavy") == AnalysisType.LATENCY
    assert coerce_analysis_type("anomalies", "error heavy") == AnalysisType.ERRORS
    assert coerce_analysis_type(None, None) == AnalysisType.GENERAL
