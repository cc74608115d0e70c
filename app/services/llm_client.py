"""Thin Bedrock client wrapper for single-turn text generation."""

from __future__ import annotations

import logging

from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import GenerationClientInterface
from app.config.settings import BedrockConfig
from app.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class LlmInvocationError(RuntimeError):
    """Raised when the Bedrock invocation fails."""


class BedrockLlmClient(GenerationClientInterface):
    """Invoke Amazon Bedrock models with standard configuration."""

    def __init__(self, config: BedrockConfig, *, read_timeout: float | None = None) -> None:
        self._config = config
        self._client = create_boto3_client(
            "bedrock-runtime",
            region_name=config.region,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=(
                config.secret_key.get_secret_value() if config.secret_key else None
            ),
            read_timeout=read_timeout,
        )

    async def generate(self, prompt: str, *, temperature: float) -> str:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        inference_cfg = {
            "maxTokens": self._config.max_tokens,
            "temperature": temperature,
            "topP": self._config.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=self._config.model_id,
                messages=[{"role": "user", "content": [{"text": prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            return await run_in_threadpool(_call)
        except Exception as exc:  # pragma: no cover - external dependency
            logger.error("Bedrock converse failed model=%s: %s", self._config.model_id, exc)
            raise LlmInvocationError(str(exc)) from exc


__all__ = ["BedrockLlmClient", "LlmInvocationError"]
