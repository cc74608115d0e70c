"""Closed error taxonomy for the task analysis pipeline.

Each stage raises exactly one exception family with a ``kind`` drawn from a
fixed enumeration. The HTTP controller maps families to status codes and
never needs to inspect message strings.
"""

from __future__ import annotations

from enum import Enum


class StageName(str, Enum):
    INPUT = "input"
    TRANSCRIPTION = "transcription"
    ANALYSIS = "analysis"
    DISPATCH = "dispatch"


class PipelineError(RuntimeError):
    """Base class for stage-local failures surfaced to the caller."""

    stage: StageName
    status_code: int = 500

    def __init__(self, kind: Enum, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"[{self.stage.value}] {self.message}"


class InputErrorKind(str, Enum):
    MISSING = "missing"
    UNSUPPORTED = "unsupported"


class InputError(PipelineError):
    """Neither usable audio nor text was supplied."""

    stage = StageName.INPUT
    status_code = 400

    def __str__(self) -> str:
        # Shown verbatim to the client, so no stage prefix.
        return self.message


class TranscriptionErrorKind(str, Enum):
    DECODE = "decode"
    EMPTY = "empty"
    UPSTREAM = "upstream"


class TranscriptionError(PipelineError):
    """Audio could not be decoded or converted to text."""

    stage = StageName.TRANSCRIPTION


class AnalysisErrorKind(str, Enum):
    UPSTREAM_FAILURE = "upstream_failure"
    MALFORMED_RESPONSE = "malformed_response"
    SCHEMA_VIOLATION = "schema_violation"


class AnalysisError(PipelineError):
    """The generation call failed or its reply did not match the schema."""

    stage = StageName.ANALYSIS


class DispatchErrorKind(str, Enum):
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    NOT_CONFIGURED = "not_configured"


class DispatchError(PipelineError):
    """The notification could not be delivered."""

    stage = StageName.DISPATCH


__all__ = [
    "AnalysisError",
    "AnalysisErrorKind",
    "DispatchError",
    "DispatchErrorKind",
    "InputError",
    "InputErrorKind",
    "PipelineError",
    "StageName",
    "TranscriptionError",
    "TranscriptionErrorKind",
]
