"""Build generation-service requests from critical paths."""
from dataclasses import dataclass
from typing import Optional

from query_generator.goals import select_analysis_goal
from query_generator.models import QueryGenerationRequest, RemotePathDescriptor, RemoteQueryRequest
from query_generator.timeouts import ModelClass, TimeoutPolicy


@dataclass(frozen=True)
class PreparedRequest:
    """Wire request plus the timeout it must complete within."""
    payload: RemoteQueryRequest
    timeout_ms: int
    model_class: Optional[ModelClass]


class QueryGenerationRequestBuilder:
    """Compose the remote request: reduced path, analysis goal, model and timeout."""

    def __init__(self, timeout_policy: Optional[TimeoutPolicy] = None, use_evaluator_optimizer: bool = True):
        self.timeout_policy = timeout_policy or TimeoutPolicy()
        self.use_evaluator_optimizer = use_evaluator_optimizer

    def build(self, request: QueryGenerationRequest) -> PreparedRequest:
        path = request.path
        analysis_goal = request.analysis_goal
        if not analysis_goal or not analysis_goal.strip():
            analysis_goal = select_analysis_goal(path.metrics)

        use_evaluator = request.use_evaluator_optimizer
        if use_evaluator is None:
            use_evaluator = self.use_evaluator_optimizer

        payload = RemoteQueryRequest(
            path=RemotePathDescriptor(
                id=path.id,
                name=path.name,
                services=list(path.services),
                start_service=path.start_service,
                end_service=path.end_service,
            ),
            analysis_goal=analysis_goal,
            model=request.preferred_model or None,
            time_window_minutes=request.time_window_minutes,
            is_managed_analyzer=request.use_managed_analyzer,
            use_evaluator_optimizer=use_evaluator,
        )
        return PreparedRequest(
            payload=payload,
            timeout_ms=self.timeout_policy.timeout_ms(request.preferred_model),
            model_class=self.timeout_policy.classify(request.preferred_model),
        )
