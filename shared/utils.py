"""Shared utility functions."""
import time
from typing import Optional


def monotonic_ms() -> float:
    """Current monotonic clock reading in milliseconds."""
    return time.monotonic() * 1000


def elapsed_ms(start_ms: float, now_ms: Optional[float] = None) -> int:
    """Whole milliseconds elapsed since a `monotonic_ms()` reading."""
    if now_ms is None:
        now_ms = monotonic_ms()
    return max(0, int(now_ms - start_ms))


def quote_sql_string(value: str) -> str:
    """Render a value as a single-quoted SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def truncate(text: Optional[str], limit: int = 100) -> str:
    """Shorten text for log fields."""
    if not text:
        return ""
    return text if len(text) <= limit else text[:limit]
