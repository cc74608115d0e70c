"""Service layer helpers for external integrations."""

from .email import SmtpMailer
from .llm_client import BedrockLlmClient
from .response_contract import ParseOutcome, parse_task_analysis, strip_code_fences
from .transcribe import TranscribeService

__all__ = [
    "BedrockLlmClient",
    "ParseOutcome",
    "SmtpMailer",
    "TranscribeService",
    "parse_task_analysis",
    "strip_code_fences",
]
