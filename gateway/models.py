"""Gateway request/response models."""
from typing import List

from pydantic import BaseModel, Field

from query_generator.models import QueryGenerationRequest, QueryGenerationResult


class BatchQueryRequest(BaseModel):
    """Several critical paths selected together in the dashboard."""
    requests: List[QueryGenerationRequest] = Field(min_length=1)


class BatchQueryResponse(BaseModel):
    """Results in the same order as the batch request."""
    results: List[QueryGenerationResult]


class ValidateQueryRequest(BaseModel):
    """SQL text to run through the safety scan."""
    sql: str
