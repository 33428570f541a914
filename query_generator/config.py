"""Query generator configuration."""
from pydantic_settings import BaseSettings

class QueryGeneratorConfig(BaseSettings):
    """Query generator configuration."""
    service_url: str = "http://localhost:4319"
    generate_query_path: str = "/api/ui-generator/generate-query"
    default_model: str = "claude-3-haiku-20240307"  # reported when the service omits a model name
    use_evaluator_optimizer: bool = True
    fallback_lookback_hours: int = 1
    fallback_timeout_threshold_ms: int = 40000
    fallback_table: str = "otel.traces"

    class Config:
        env_file = ".env"
        env_prefix = "QUERY_GEN_"
