"""Diagnostic query generation with validation and deterministic fallback."""
import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

import structlog

from query_generator.config import QueryGeneratorConfig
from query_generator.fallback import ClickHouseTracesTemplate, FallbackQuerySynthesizer
from query_generator.goals import coerce_analysis_type
from query_generator.guardrails import QuerySafetyValidator
from query_generator.models import (
    OptimizationStatus,
    QueryGenerationRequest,
    QueryGenerationResult,
    RemoteQueryResponse,
    ValidationResult,
)
from query_generator.remote_client import RemoteQueryGenerator
from query_generator.request_builder import PreparedRequest, QueryGenerationRequestBuilder
from shared.exceptions import QueryGenerationError, QueryTimeoutError, TransportError, ValidationError
from shared.utils import elapsed_ms, monotonic_ms, truncate

logger = structlog.get_logger()


@dataclass(frozen=True)
class GenerationSuccess:
    """Remote generation produced SQL that passed the safety scan."""
    result: QueryGenerationResult


@dataclass(frozen=True)
class GenerationFailure:
    """Remote generation failed; `error` names the cause."""
    error: QueryGenerationError
    elapsed_ms: int
    optimization_status: Optional[OptimizationStatus] = None

    @property
    def cause(self) -> str:
        return self.error.cause


GenerationOutcome = Union[GenerationSuccess, GenerationFailure]


class DiagnosticQueryGenerator:
    """Turn critical paths into safe diagnostic queries.

    `generate_query` never raises: every failure of the remote generation
    service (timeout, transport, malformed body, unsafe SQL) is logged and
    replaced by the deterministic fallback query. `attempt_generation`
    exposes the underlying success/failure outcome.
    """

    def __init__(
        self,
        config: Optional[QueryGeneratorConfig] = None,
        remote: Optional[RemoteQueryGenerator] = None,
        request_builder: Optional[QueryGenerationRequestBuilder] = None,
        validator: Optional[QuerySafetyValidator] = None,
        fallback: Optional[FallbackQuerySynthesizer] = None,
        clock: Callable[[], float] = monotonic_ms,
    ):
        self.config = config or QueryGeneratorConfig()
        self.remote = remote or RemoteQueryGenerator(self.config)
        self.request_builder = request_builder or QueryGenerationRequestBuilder(
            use_evaluator_optimizer=self.config.use_evaluator_optimizer
        )
        self.validator = validator or QuerySafetyValidator()
        self.fallback = fallback or FallbackQuerySynthesizer(
            template=ClickHouseTracesTemplate(self.config.fallback_table),
            lookback_hours=self.config.fallback_lookback_hours,
            timeout_threshold_ms=self.config.fallback_timeout_threshold_ms,
        )
        self._clock = clock

    def validate_query(self, sql: str) -> ValidationResult:
        """Run the static safety scan on SQL text."""
        return self.validator.validate_query(sql)

    async def generate_query(self, request: QueryGenerationRequest) -> QueryGenerationResult:
        """Generate a diagnostic query, falling back to the fixed template on any failure."""
        start = self._clock()
        try:
            outcome = await self.attempt_generation(request)
        except Exception as e:
            logger.error("Query generation pipeline failed", path_id=request.path.id, error=str(e), exc_info=True)
            outcome = GenerationFailure(
                error=QueryGenerationError(str(e)),
                elapsed_ms=elapsed_ms(start, self._clock()),
            )

        if isinstance(outcome, GenerationSuccess):
            return outcome.result

        logger.warning(
            "Substituting fallback query",
            path_id=request.path.id,
            model=request.preferred_model,
            cause=outcome.cause,
            error=str(outcome.error),
            elapsed_ms=outcome.elapsed_ms,
        )
        return self.fallback.synthesize(
            request.path,
            generation_time_ms=outcome.elapsed_ms,
            optimization_status=outcome.optimization_status,
        )

    async def generate_queries(self, requests: Sequence[QueryGenerationRequest]) -> List[QueryGenerationResult]:
        """Generate queries for several paths concurrently, preserving order."""
        results = await asyncio.gather(*(self.generate_query(request) for request in requests))
        return list(results)

    async def attempt_generation(self, request: QueryGenerationRequest) -> GenerationOutcome:
        """Single remote attempt, with the result validated before it is accepted."""
        start = self._clock()
        prepared = self.request_builder.build(request)
        log = logger.bind(
            path_id=request.path.id,
            model=prepared.payload.model,
            model_class=prepared.model_class.value if prepared.model_class else None,
            timeout_ms=prepared.timeout_ms,
        )
        log.info("Requesting diagnostic query", services_count=len(prepared.payload.path.services))

        try:
            response = await asyncio.wait_for(self._call_remote(prepared), timeout=prepared.timeout_ms / 1000)
        except asyncio.TimeoutError:
            return self._failure(
                log,
                QueryTimeoutError(f"No response within {prepared.timeout_ms}ms", timeout_ms=prepared.timeout_ms),
                start,
            )
        except QueryGenerationError as e:
            return self._failure(log, e, start)
        except Exception as e:
            log.error("Generation service call raised unexpectedly", error=str(e), exc_info=True)
            return self._failure(log, TransportError(f"Unexpected generation failure: {e}"), start)

        validation = self.validator.validate_query(response.sql)
        if not validation.valid:
            log.warning("Rejected generated SQL", errors=validation.errors, sql=truncate(response.sql))
            return self._failure(
                log,
                ValidationError("Generated SQL failed safety validation", errors=validation.errors),
                start,
                optimization_status=response.optimization_status,
            )

        result = self._assemble(request, prepared, response, elapsed_ms(start, self._clock()))
        log.info(
            "Generated validated diagnostic query",
            generation_time_ms=result.generation_time_ms,
            analysis_type=result.analysis_type.value,
            sql=truncate(result.sql),
        )
        return GenerationSuccess(result=result)

    async def _call_remote(self, prepared: PreparedRequest) -> RemoteQueryResponse:
        return await self.remote.generate(prepared.payload, prepared.timeout_ms)

    def _failure(
        self,
        log,
        error: QueryGenerationError,
        start: float,
        optimization_status: Optional[OptimizationStatus] = None,
    ) -> GenerationFailure:
        elapsed = elapsed_ms(start, self._clock())
        log.warning("Diagnostic query generation failed", cause=error.cause, error=str(error), elapsed_ms=elapsed)
        return GenerationFailure(error=error, elapsed_ms=elapsed, optimization_status=optimization_status)

    def _assemble(
        self,
        request: QueryGenerationRequest,
        prepared: PreparedRequest,
        response: RemoteQueryResponse,
        elapsed: int,
    ) -> QueryGenerationResult:
        generation_time_ms = elapsed
        if response.generation_time_ms is not None:
            generation_time_ms = int(response.generation_time_ms)

        return QueryGenerationResult(
            sql=response.sql,
            model=response.model or prepared.payload.model or self.config.default_model,
            generation_time_ms=generation_time_ms,
            description=response.description or f"Diagnostic query for {request.path.name}",
            critical_path=request.path.name,
            analysis_type=coerce_analysis_type(response.analysis_type, response.description),
            optimization_status=response.optimization_status,
        )
