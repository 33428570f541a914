"""Deterministic fallback queries for when remote generation is unavailable."""
from typing import List, Optional

import structlog

from critical_path.models import CriticalPath
from query_generator.goals import classify_analysis_type
from query_generator.models import OptimizationStatus, QueryGenerationResult
from shared.utils import quote_sql_string

logger = structlog.get_logger()

FALLBACK_MODEL = "fallback"
TIMEOUT_DESCRIPTION = "Fallback query - generation timed out"
UNAVAILABLE_DESCRIPTION = "Fallback query - API unavailable"


class FallbackTemplate:
    """Renders the fallback query in a specific telemetry store dialect."""

    def render(self, quoted_services: List[str], lookback_hours: int) -> str:
        raise NotImplementedError


class ClickHouseTracesTemplate(FallbackTemplate):
    """Per-minute RED breakdown over the ClickHouse traces table."""

    def __init__(self, table: str = "otel.traces"):
        self.table = table

    def render(self, quoted_services: List[str], lookback_hours: int) -> str:
        service_list = ", ".join(quoted_services)
        return f"""SELECT
  service_name,
  toStartOfMinute(start_time) as minute,
  count() as request_count,
  quantile(0.5)(duration_ns/1000000) as p50_ms,
  quantile(0.95)(duration_ns/1000000) as p95_ms,
  quantile(0.99)(duration_ns/1000000) as p99_ms,
  sum(CASE WHEN status_code != 'OK' THEN 1 ELSE 0 END) as error_count,
  round(sum(CASE WHEN status_code != 'OK' THEN 1 ELSE 0 END) * 100.0 / count(), 2) as error_rate
FROM {self.table}
WHERE
  service_name IN ({service_list})
  AND start_time >= now() - INTERVAL {int(lookback_hours)} HOUR
GROUP BY service_name, minute
ORDER BY minute DESC, service_name
LIMIT 1000"""


class FallbackQuerySynthesizer:
    """Build an always-available diagnostic query from a critical path alone."""

    def __init__(
        self,
        template: Optional[FallbackTemplate] = None,
        lookback_hours: int = 1,
        timeout_threshold_ms: int = 40000,
    ):
        self.template = template or ClickHouseTracesTemplate()
        self.lookback_hours = lookback_hours
        self.timeout_threshold_ms = timeout_threshold_ms

    def describe(self, generation_time_ms: int) -> str:
        if generation_time_ms > self.timeout_threshold_ms:
            return TIMEOUT_DESCRIPTION
        return UNAVAILABLE_DESCRIPTION

    def synthesize(
        self,
        path: CriticalPath,
        generation_time_ms: int = 0,
        optimization_status: Optional[OptimizationStatus] = None,
    ) -> QueryGenerationResult:
        """Render the fallback query for a path.

        The SQL depends only on the service list and the lookback window;
        the path name is reported in the result but never interpolated.
        """
        analysis_type = classify_analysis_type(path.metrics)
        quoted = [quote_sql_string(service) for service in path.services]
        sql = self.template.render(quoted, self.lookback_hours)

        logger.info(
            "Synthesized fallback query",
            path_id=path.id,
            analysis_type=analysis_type.value,
            services_count=len(path.services),
        )
        return QueryGenerationResult(
            sql=sql,
            model=FALLBACK_MODEL,
            generation_time_ms=max(0, int(generation_time_ms)),
            description=self.describe(generation_time_ms),
            critical_path=path.name,
            analysis_type=analysis_type,
            optimization_status=optimization_status,
        )
