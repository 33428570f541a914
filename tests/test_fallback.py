from conftest import make_path

from query_generator.fallback import (
    FALLBACK_MODEL,
    TIMEOUT_DESCRIPTION,
    UNAVAILABLE_DESCRIPTION,
    FallbackQuerySynthesizer,
    FallbackTemplate,
)
from query_generator.guardrails import validate_query
from query_generator.models import AnalysisType, OptimizationStatus


def test_error_heavy_path_scenario(checkout_path):
    result = FallbackQuerySynthesizer().synthesize(checkout_path, generation_time_ms=120)

    assert "service_name IN ('frontend', 'cart', 'checkout', 'payment', 'email')" in result.sql
    assert result.analysis_type == AnalysisType.ERRORS
    assert result.model == FALLBACK_MODEL
    assert result.critical_path == "Checkout Flow"
    assert result.generation_time_ms == 120
    assert validate_query(result.sql).valid


def test_one_hour_lookback():
    result = FallbackQuerySynthesizer().synthesize(make_path())
    assert "INTERVAL 1 HOUR" in result.sql
    assert "FROM otel.traces" in result.sql


def test_quotes_in_service_names_are_doubled():
    path = make_path(services=["o'brien-api", "cart"])
    result = FallbackQuerySynthesizer().synthesize(path)
    assert "IN ('o''brien-api', 'cart')" in result.sql
    assert validate_query(result.sql).valid


def test_path_name_is_not_interpolated():
    path = make_path(name="Profile UPDATE flow; DROP TABLE x")
    result = FallbackQuerySynthesizer().synthesize(path)
    assert "Profile" not in result.sql
    assert validate_query(result.sql).valid
    assert result.critical_path == "Profile UPDATE flow; DROP TABLE x"


def test_description_distinguishes_timeouts():
    synth = FallbackQuerySynthesizer()
    assert synth.synthesize(make_path(), generation_time_ms=40001).description == TIMEOUT_DESCRIPTION
    assert synth.synthesize(make_path(), generation_time_ms=40000).description == UNAVAILABLE_DESCRIPTION
    assert synth.synthesize(make_path(), generation_time_ms=5).description == UNAVAILABLE_DESCRIPTION


def test_analysis_type_buckets():
    synth = FallbackQuerySynthesizer()
    assert synth.synthesize(make_path(error_rate=0.01, p99_latency=2500)).analysis_type == AnalysisType.BOTTLENECKS
    assert synth.synthesize(make_path(error_rate=0.01, p99_latency=1500)).analysis_type == AnalysisType.LATENCY
    assert synth.synthesize(make_path(error_rate=0.01, p99_latency=100)).analysis_type == AnalysisType.GENERAL


def test_deterministic(checkout_path):
    synth = FallbackQuerySynthesizer()
    assert synth.synthesize(checkout_path).sql == synth.synthesize(checkout_path).sql


def test_optimization_status_is_passed_through():
    status = OptimizationStatus(was_optimized=True, attempts=3, final_valid=False)
    result = FallbackQuerySynthesizer().synthesize(make_path(), optimization_status=status)
    assert result.optimization_status == status


class PostgresTemplate(FallbackTemplate):
    def render(self, quoted_services, lookback_hours):
        return (
            "SELECT service_name, count(*) FROM spans "
            f"WHERE service_name IN ({', '.join(quoted_services)}) "
            f"AND start_time >= now() - interval '{lookback_hours} hours' GROUP BY service_name"
        )


def test_template_is_swappable():
    synth = FallbackQuerySynthesizer(template=PostgresTemplate(), lookback_hours=6)
    result = synth.synthesize(make_path(services=["api"], error_rate=0.2))
    assert result.sql.startswith("SELECT service_name, count(*) FROM spans")
    assert "interval '6 hours'" in result.sql
    assert result.analysis_type == AnalysisType.ERRORS
