"""Pydantic-backed validation of the generation service's JSON reply.

The analysis engine never parses model output itself; it hands the raw text
to :func:`parse_task_analysis` and receives a :class:`ParseOutcome` that is
either a validated :class:`TaskAnalysis` or an :class:`AnalysisError`.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from app.domain.errors import AnalysisError, AnalysisErrorKind
from app.domain.models import AnalysisSchema, TaskAnalysis

_OPENING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(payload: str) -> str:
    """Remove a Markdown code fence wrapped around the payload, if any."""

    if not payload:
        return ""

    cleaned = payload.strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


@dataclass(frozen=True)
class ParseOutcome:
    """Tagged parse result: exactly one of ``analysis`` / ``error`` is set."""

    analysis: Optional[TaskAnalysis] = None
    error: Optional[AnalysisError] = None

    @classmethod
    def ok(cls, analysis: TaskAnalysis) -> "ParseOutcome":
        return cls(analysis=analysis)

    @classmethod
    def failed(cls, error: AnalysisError) -> "ParseOutcome":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.analysis is not None

    def unwrap(self) -> TaskAnalysis:
        if self.analysis is None:
            raise self.error or AnalysisError(
                AnalysisErrorKind.MALFORMED_RESPONSE, "No analysis was produced."
            )
        return self.analysis


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        problems.append(f"{location}: {error.get('msg')}")
    return "; ".join(problems)


def parse_task_analysis(payload: str, schema: AnalysisSchema) -> ParseOutcome:
    """Strip fences, decode JSON and validate it against ``schema``."""

    cleaned = strip_code_fences(payload)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        error = AnalysisError(
            AnalysisErrorKind.MALFORMED_RESPONSE,
            f"AI reply is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
        )
        error.__cause__ = exc
        return ParseOutcome.failed(error)

    if not isinstance(data, dict):
        return ParseOutcome.failed(
            AnalysisError(
                AnalysisErrorKind.MALFORMED_RESPONSE,
                f"AI reply must be a JSON object, got {type(data).__name__}.",
            )
        )

    try:
        analysis = TaskAnalysis.model_validate(data, context={"schema": schema})
    except ValidationError as exc:
        error = AnalysisError(
            AnalysisErrorKind.SCHEMA_VIOLATION,
            f"AI reply violates the {schema.name} schema: {_describe_validation_error(exc)}",
        )
        error.__cause__ = exc
        return ParseOutcome.failed(error)

    return ParseOutcome.ok(analysis)


__all__ = ["ParseOutcome", "parse_task_analysis", "strip_code_fences"]
