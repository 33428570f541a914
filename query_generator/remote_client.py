"""HTTP client for the remote query generation service."""
from typing import Optional

import httpx
import structlog
from pydantic import ValidationError as SchemaError

from query_generator.config import QueryGeneratorConfig
from query_generator.models import RemoteQueryRequest, RemoteQueryResponse
from shared.exceptions import MalformedResponseError, QueryTimeoutError, TransportError
from shared.utils import truncate

logger = structlog.get_logger()

class RemoteQueryGenerator:
    """Client for the generate-query endpoint of the generation service.

    The service may run its own validate/optimize loop when asked to; this
    client performs a single exchange and never retries.
    """

    def __init__(
        self,
        config: Optional[QueryGeneratorConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or QueryGeneratorConfig()
        self.url = self.config.service_url.rstrip("/") + self.config.generate_query_path
        self.headers = {"Content-Type": "application/json"}
        self._client = client

    async def generate(self, request: RemoteQueryRequest, timeout_ms: int) -> RemoteQueryResponse:
        """Issue one generation request bounded by `timeout_ms`."""
        timeout = httpx.Timeout(timeout_ms / 1000)
        payload = request.to_payload()

        if self._client is not None:
            response = await self._post(self._client, payload, timeout, timeout_ms)
        else:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await self._post(client, payload, timeout, timeout_ms)

        return self._parse(response)

    async def _post(self, client: httpx.AsyncClient, payload: dict, timeout: httpx.Timeout, timeout_ms: int) -> httpx.Response:
        try:
            response = await client.post(self.url, json=payload, headers=self.headers, timeout=timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise QueryTimeoutError(f"Generation service timed out after {timeout_ms}ms", timeout_ms=timeout_ms) from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise TransportError(
                f"Generation service returned HTTP {status_code}: {truncate(e.response.text, 200)}",
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Generation service request failed: {e}") from e

        logger.debug("Generation service responded", status_code=response.status_code, url=self.url)
        return response

    def _parse(self, response: httpx.Response) -> RemoteQueryResponse:
        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError("Generation service returned a non-JSON body") from e

        if not isinstance(body, dict):
            raise MalformedResponseError(f"Expected a JSON object, got {type(body).__name__}")

        sql = body.get("sql")
        if not isinstance(sql, str) or not sql.strip():
            raise MalformedResponseError("Generation service response is missing sql")

        try:
            return RemoteQueryResponse.model_validate(body)
        except SchemaError as e:
            raise MalformedResponseError(f"Generation service response failed schema check: {e}") from e
