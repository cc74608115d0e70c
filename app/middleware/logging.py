"""Request summary logging for the task analysis service."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.config.settings import settings

logger = logging.getLogger("app.middleware.structured")
outcome_logger = logging.getLogger("app.middleware.outcomes")

COLOR_RESET = "\u001b[0m"
COLOR_GREEN = "\u001b[32m"
COLOR_CYAN = "\u001b[36m"
COLOR_YELLOW = "\u001b[33m"
COLOR_RED = "\u001b[31m"

ANALYSIS_PATH_PREFIX = "/api/"


def request_outcome(request: Request) -> Optional[str]:
    """Outcome label the task controller left on ``request.state``, if any."""

    return getattr(request.state, "pipeline_outcome", None)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one colored line per request with the pipeline variant and outcome.

    Requests handled by the analysis route also produce a compact JSON record
    on ``app.middleware.outcomes`` so failed stages can be grepped by kind.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        summary: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "variant": settings.pipeline.variant,
        }
        if request.url.path.startswith(ANALYSIS_PATH_PREFIX):
            summary["body_bytes"] = int(request.headers.get("content-length") or 0)

        try:
            response = await call_next(request)
        except Exception as exc:
            summary["status"] = 500
            summary["outcome"] = "crashed"
            summary["duration_ms"] = self._elapsed_ms(start_time)
            logger.exception("%s error=%r", self._format_console_message(summary), exc)
            raise

        summary["status"] = response.status_code
        summary["outcome"] = request_outcome(request)
        summary["duration_ms"] = self._elapsed_ms(start_time)
        logger.info(self._format_console_message(summary))
        if summary["outcome"] is not None:
            outcome_logger.info(json.dumps(summary, ensure_ascii=False, separators=(",", ":")))
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)

    @staticmethod
    def _format_console_message(summary: dict[str, Any]) -> str:
        status = summary.get("status") or 0
        if 200 <= status < 300:
            color = COLOR_GREEN
        elif 400 <= status < 500:
            color = COLOR_YELLOW
        elif status >= 500:
            color = COLOR_RED
        else:
            color = COLOR_CYAN

        message = " ".join(
            f"{name}={'-' if value is None else value}" for name, value in summary.items()
        )
        return f"{color}{message}{COLOR_RESET}"
