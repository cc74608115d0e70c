"""Request orchestration: normalize, analyze, format, dispatch."""

from __future__ import annotations

import asyncio
import logging

from app.application.interfaces import (
    NotificationDispatcherInterface,
    TranscriptionClientInterface,
)
from app.domain.errors import DispatchError, DispatchErrorKind, PipelineError
from app.domain.models import AnalysisSchema, PipelineResult
from app.telemetry import observe_analysis_outcome

from .engine import AnalysisEngine
from .ingestion import normalize_input
from .notification import render_notification

logger = logging.getLogger("app.services.analysis_pipeline")


class TaskAnalysisOrchestrator:
    """Run one submission through every stage, stopping at the first failure.

    Collaborators are injected once at startup and shared read-only across
    requests; the orchestrator itself holds no per-request state.
    """

    def __init__(
        self,
        *,
        transcriber: TranscriptionClientInterface,
        engine: AnalysisEngine,
        mailer: NotificationDispatcherInterface,
        language_code: str = "cs-CZ",
        transcription_timeout: float | None = None,
        dispatch_timeout: float | None = None,
    ) -> None:
        self._transcriber = transcriber
        self._engine = engine
        self._mailer = mailer
        self._language_code = language_code
        self._transcription_timeout = transcription_timeout
        self._dispatch_timeout = dispatch_timeout

    @property
    def schema(self) -> AnalysisSchema:
        return self._engine.schema

    async def run(
        self,
        *,
        audio_base64: str | None = None,
        text: str | None = None,
        user_email: str | None = None,
    ) -> PipelineResult:
        logger.info(
            "Received request: has_audio=%s has_text=%s user_email=%s",
            bool(audio_base64),
            bool(text),
            user_email,
        )
        try:
            result = await self._run(audio_base64=audio_base64, text=text, user_email=user_email)
        except PipelineError as exc:
            observe_analysis_outcome(self.schema.name, f"{exc.stage.value}_{exc.kind.value}")
            raise
        observe_analysis_outcome(self.schema.name, "success")
        return result

    async def _run(
        self,
        *,
        audio_base64: str | None,
        text: str | None,
        user_email: str | None,
    ) -> PipelineResult:
        canonical = await normalize_input(
            audio_base64=audio_base64,
            text=text,
            schema=self.schema,
            transcriber=self._transcriber,
            language_code=self._language_code,
            timeout=self._transcription_timeout,
        )
        logger.info("Canonical text source=%s: %s", canonical.source.value, canonical.text)

        analysis = await self._engine.analyze(canonical.text)
        logger.info(
            "Analysis completed priority=%s pareto=%s category=%s",
            analysis.priority,
            analysis.is_pareto_task,
            analysis.category,
        )

        notification = render_notification(analysis, canonical.text)

        dispatched = False
        if user_email:
            await self._dispatch(user_email, notification.subject, notification.body)
            dispatched = True
            logger.info("Email sent to: %s", user_email)

        return PipelineResult(
            canonical=canonical,
            analysis=analysis,
            notification=notification,
            dispatched=dispatched,
        )

    async def _dispatch(self, recipient: str, subject: str, body: str) -> None:
        try:
            await asyncio.wait_for(
                self._mailer.send(recipient=recipient, subject=subject, body=body),
                timeout=self._dispatch_timeout,
            )
        except DispatchError:
            raise
        except asyncio.TimeoutError as exc:
            raise DispatchError(
                DispatchErrorKind.TIMEOUT,
                f"Chyba při posílání emailu: no reply within {self._dispatch_timeout}s",
            ) from exc
        except Exception as exc:
            raise DispatchError(
                DispatchErrorKind.TRANSPORT, f"Chyba při posílání emailu: {exc}"
            ) from exc


__all__ = ["TaskAnalysisOrchestrator"]
