"""FastAPI application entry point."""
from datetime import datetime, timezone
from functools import lru_cache

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gateway.config import GatewayConfig
from gateway.models import BatchQueryRequest, BatchQueryResponse, ValidateQueryRequest
from query_generator.generator import DiagnosticQueryGenerator
from query_generator.models import QueryGenerationRequest, QueryGenerationResult, ValidationResult
from shared.logger import setup_logging

config = GatewayConfig()
logger = setup_logging(config.log_level)
app = FastAPI(title=config.api_title, version=config.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_query_generator() -> DiagnosticQueryGenerator:
    """Shared generator; it holds no per-request state."""
    return DiagnosticQueryGenerator()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post(f"{config.api_prefix}/diagnostic-query", response_model=QueryGenerationResult)
async def diagnostic_query(
    request: QueryGenerationRequest,
    generator: DiagnosticQueryGenerator = Depends(get_query_generator),
):
    """Generate a diagnostic query for one critical path."""
    logger.info("Received diagnostic query request", path_id=request.path.id, model=request.preferred_model)
    result = await generator.generate_query(request)
    logger.info(
        "Diagnostic query ready",
        path_id=request.path.id,
        model=result.model,
        fallback=result.is_fallback,
        generation_time_ms=result.generation_time_ms,
    )
    return result


@app.post(f"{config.api_prefix}/diagnostic-query/batch", response_model=BatchQueryResponse)
async def diagnostic_query_batch(
    batch: BatchQueryRequest,
    generator: DiagnosticQueryGenerator = Depends(get_query_generator),
):
    """Generate diagnostic queries for several critical paths concurrently."""
    logger.info("Received batch diagnostic query request", paths_count=len(batch.requests))
    results = await generator.generate_queries(batch.requests)
    return BatchQueryResponse(results=results)


@app.post(f"{config.api_prefix}/validate-query", response_model=ValidationResult)
async def validate_query(
    body: ValidateQueryRequest,
    generator: DiagnosticQueryGenerator = Depends(get_query_generator),
):
    """Run the static safety scan on SQL text."""
    return generator.validate_query(body.sql)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.host, port=config.port)
