"""Shared HTTP plumbing for geocoding and routing providers."""

import time
from typing import Any

import httpx

from backend.shiori.errors import PlannerError
from backend.shiori.utils.logging import StructuredProviderLogger
from backend.shiori.utils.metrics import PrometheusTravelMetrics


def provider_message(response: httpx.Response) -> str:
    """Best-effort human message from a provider error response.

    OpenRouteService answers ``{"error": {"message": ...}}``; others may
    send ``{"error": "..."}`` or plain text.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if body.get("message"):
            return str(body["message"])
    text = response.text.strip()
    return text[:200] if text else f"HTTP {response.status_code}"


class HttpProvider:
    """Base for provider clients: one JSON request per call, no retries.

    Failures are raised as ``error_cls`` with the provider's message kept.
    """

    name = "provider"
    error_cls: type[PlannerError] = PlannerError

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 4.0,
        metrics: PrometheusTravelMetrics | None = None,
        provider_logger: StructuredProviderLogger | None = None,
    ) -> None:
        self._client = client
        self._timeout = timeout_seconds
        self._metrics = metrics or PrometheusTravelMetrics()
        self._log = provider_logger or StructuredProviderLogger()

    def _fail(self, operation: str, started: float, reason: str, message: str) -> PlannerError:
        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_latency(self.name, "error", latency_ms)
        self._metrics.inc_error(self.name, reason)
        self._log.log_call(self.name, operation, "error", latency_ms, error_reason=reason)
        return self.error_cls(f"{self.name}: {message}")

    async def _request_json(self, operation: str, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and decode the JSON body.

        Args:
            operation: Label for logs/metrics (e.g. "geocode")
            method: HTTP method
            url: Absolute URL
            **kwargs: Passed to ``httpx.AsyncClient.request``

        Returns:
            Decoded JSON body
        """
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        started = time.perf_counter()
        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise self._fail(
                operation,
                started,
                f"http_{e.response.status_code}",
                provider_message(e.response),
            ) from e
        except httpx.HTTPError as e:
            raise self._fail(operation, started, type(e).__name__, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise self._fail(operation, started, "invalid_json", "invalid JSON response") from e
        finally:
            if close_client:
                await client.aclose()

        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_latency(self.name, "success", latency_ms)
        self._log.log_call(
            self.name,
            operation,
            "success",
            latency_ms,
            result_count=len(data) if isinstance(data, list) else None,
        )
        return data
