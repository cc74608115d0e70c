"""Analysis stage (Stage 03): prompt, generation call, validated result."""

from __future__ import annotations

import asyncio
import logging

from app.application.interfaces import GenerationClientInterface
from app.domain.errors import AnalysisError, AnalysisErrorKind
from app.domain.models import AnalysisSchema, TaskAnalysis
from app.services.response_contract import parse_task_analysis

from .prompts import build_analysis_prompt

logger = logging.getLogger("app.services.analysis_pipeline")

DEFAULT_TEMPERATURE = 0.3


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


class AnalysisEngine:
    """Turn canonical text into a validated :class:`TaskAnalysis`.

    Exactly one generation call is made per :meth:`analyze`; failures are
    never retried.
    """

    def __init__(
        self,
        generator: GenerationClientInterface,
        schema: AnalysisSchema,
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float | None = None,
    ) -> None:
        self._generator = generator
        self._schema = schema
        self._temperature = temperature
        self._timeout = timeout

    @property
    def schema(self) -> AnalysisSchema:
        return self._schema

    async def analyze(self, text: str) -> TaskAnalysis:
        prompt = build_analysis_prompt(text, self._schema)
        logger.info(
            "Requesting analysis variant=%s temperature=%s\nPROMPT> %s",
            self._schema.name,
            self._temperature,
            _truncate(prompt),
        )

        try:
            raw_response = await asyncio.wait_for(
                self._generator.generate(prompt, temperature=self._temperature),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise AnalysisError(
                AnalysisErrorKind.UPSTREAM_FAILURE,
                f"Chyba při AI analýze: no reply within {self._timeout}s",
            ) from exc
        except Exception as exc:
            raise AnalysisError(
                AnalysisErrorKind.UPSTREAM_FAILURE,
                f"Chyba při AI analýze: {exc}",
            ) from exc

        if not raw_response or not raw_response.strip():
            raise AnalysisError(
                AnalysisErrorKind.MALFORMED_RESPONSE, "AI returned an empty reply."
            )

        logger.info("Raw AI response: %s", _truncate(raw_response))

        outcome = parse_task_analysis(raw_response, self._schema)
        if not outcome.is_ok:
            logger.warning("AI reply rejected kind=%s: %s", outcome.error.kind.value, outcome.error.message)
        return outcome.unwrap()


__all__ = ["AnalysisEngine", "DEFAULT_TEMPERATURE"]
