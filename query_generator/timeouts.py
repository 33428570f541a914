"""Model-aware timeouts for remote query generation."""
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple


class ModelClass(str, Enum):
    """Deployment class of a generation model."""
    LOCAL = "local"
    CLOUD = "cloud"
    DEFAULT = "default"


# Ordered: local families first, the first fragment found in an identifier wins.
DEFAULT_MODEL_FAMILIES: Tuple[Tuple[str, ModelClass], ...] = (
    ("llama", ModelClass.LOCAL),
    ("codellama", ModelClass.LOCAL),
    ("sqlcoder", ModelClass.LOCAL),
    ("starcoder", ModelClass.LOCAL),
    ("deepseek", ModelClass.LOCAL),
    ("qwen", ModelClass.LOCAL),
    ("mistral", ModelClass.LOCAL),
    ("ollama", ModelClass.LOCAL),
    ("lmstudio", ModelClass.LOCAL),
    ("gpt", ModelClass.CLOUD),
    ("claude", ModelClass.CLOUD),
    ("gemini", ModelClass.CLOUD),
    ("openai", ModelClass.CLOUD),
    ("anthropic", ModelClass.CLOUD),
)

DEFAULT_TIMEOUTS_MS: Dict[ModelClass, int] = {
    ModelClass.LOCAL: 60000,
    ModelClass.CLOUD: 30000,
    ModelClass.DEFAULT: 45000,
}

NO_MODEL_TIMEOUT_MS = 30000


class TimeoutPolicy:
    """Resolve a bounded generation timeout from a model identifier.

    Matching is a case-insensitive substring test against an ordered table
    of name fragments; the first fragment found in the identifier decides
    the model class. Nothing is cached, the model varies per request.
    """

    def __init__(
        self,
        families: Optional[Sequence[Tuple[str, ModelClass]]] = None,
        timeouts_ms: Optional[Dict[ModelClass, int]] = None,
        no_model_timeout_ms: int = NO_MODEL_TIMEOUT_MS,
    ):
        self.families = tuple(
            (fragment.lower(), model_class)
            for fragment, model_class in (families if families is not None else DEFAULT_MODEL_FAMILIES)
        )
        self.timeouts_ms = dict(DEFAULT_TIMEOUTS_MS)
        if timeouts_ms:
            self.timeouts_ms.update(timeouts_ms)
        self.no_model_timeout_ms = no_model_timeout_ms

    def classify(self, model: Optional[str]) -> Optional[ModelClass]:
        """Model class for an identifier, or None when no model was given."""
        if model is None or not model.strip():
            return None
        lowered = model.lower()
        for fragment, model_class in self.families:
            if fragment in lowered:
                return model_class
        return ModelClass.DEFAULT

    def timeout_ms(self, model: Optional[str]) -> int:
        model_class = self.classify(model)
        if model_class is None:
            return self.no_model_timeout_ms
        return self.timeouts_ms[model_class]

    def __call__(self, model: Optional[str]) -> int:
        return self.timeout_ms(model)
