"""Structured logging for travel provider calls."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredProviderLogger:
    """Structured logger for geocoding/routing provider calls."""

    def log_call(
        self,
        provider: str,
        operation: str,
        outcome: str,
        latency_ms: float,
        result_count: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log one provider call with structured data."""
        log_data: dict[str, Any] = {
            "provider": provider,
            "operation": operation,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if result_count is not None:
            log_data["result_count"] = result_count
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Provider call: {provider}.{operation} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
