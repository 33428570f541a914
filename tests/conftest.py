import asyncio

import pytest

from critical_path.models import CriticalPath
from query_generator.models import RemoteQueryResponse


CHECKOUT_SERVICES = ["frontend", "cart", "checkout", "payment", "email"]


def make_path(services=None, error_rate=0.01, p99_latency=500, name="Checkout Flow", **extra):
    return CriticalPath(
        id=extra.pop("id", "path-checkout"),
        name=name,
        services=services or list(CHECKOUT_SERVICES),
        edges=extra.pop("edges", [{"source": "frontend", "target": "cart"}]),
        metrics={
            "requestCount": 1200,
            "avgLatency": 180,
            "errorRate": error_rate,
            "p99Latency": p99_latency,
        },
        priority=extra.pop("priority", "critical"),
        **extra,
    )


class StubRemote:
    """Generation service double that records calls and returns a fixed response."""

    def __init__(self, response=None, **fields):
        if response is None:
            body = {
                "sql": "SELECT service_name, count() FROM otel.traces GROUP BY service_name",
                "model": "claude-3-haiku-20240307",
                "description": "Error distribution across checkout services",
                "analysisType": "errors",
                "generationTimeMs": 1234,
            }
            body.update(fields)
            response = RemoteQueryResponse.model_validate(body)
        self.response = response
        self.calls = []

    async def generate(self, request, timeout_ms):
        self.calls.append((request, timeout_ms))
        return self.response


class RaisingRemote:
    """Generation service double whose coroutine raises."""

    def __init__(self, error):
        self.error = error
        self.calls = 0

    async def generate(self, request, timeout_ms):
        self.calls += 1
        raise self.error


class SyncRaisingRemote:
    """Raises before ever producing an awaitable."""

    def generate(self, request, timeout_ms):
        raise RuntimeError("client not initialised")


class HangingRemote:
    """Never answers within any reasonable timeout."""

    async def generate(self, request, timeout_ms):
        await asyncio.sleep(30)
        raise AssertionError("late response must be discarded")


@pytest.fixture
def checkout_path():
    return make_path(error_rate=0.08, p99_latency=1200)


@pytest.fixture
def healthy_path():
    return make_path(error_rate=0.0, p99_latency=300)
