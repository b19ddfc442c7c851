"""Structured logging for engine operations."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredEngineLogger:
    """Structured logger for engine calls and rejected inputs."""

    def log_call(
        self,
        operation: str,
        latency_ms: float,
        input_count: int,
        output_count: int,
    ) -> None:
        """Log a completed engine operation with structured data."""
        log_data: dict[str, Any] = {
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "input_count": input_count,
            "output_count": output_count,
        }

        logger.info(f"Engine call: {operation}", extra={"structured": log_data})

    def log_rejection(self, operation: str, reason: str, fields: list[str] | None = None) -> None:
        """Log a rejected caller input."""
        log_data: dict[str, Any] = {
            "operation": operation,
            "reason": reason,
        }

        if fields:
            log_data["fields"] = fields

        logger.warning(f"Engine input rejected: {operation} - {reason}", extra={"structured": log_data})
