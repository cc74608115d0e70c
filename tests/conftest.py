"""Shared fixtures: collaborator fakes and a TestClient wired to them."""

from __future__ import annotations

import json
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.application.interfaces import (  # noqa: E402
    GenerationClientInterface,
    NotificationDispatcherInterface,
    TranscriptionClientInterface,
)
from app.controllers.dependencies import get_orchestrator  # noqa: E402
from app.domain.models import BASIC_SCHEMA, EXTENDED_SCHEMA  # noqa: E402
from app.main import app  # noqa: E402
from app.pipelines.analysis import AnalysisEngine, TaskAnalysisOrchestrator  # noqa: E402

VALID_REPLY = {
    "priority": 5,
    "isParetoTask": True,
    "firstStep": "Otevřít dokument",
    "timeEstimate": "30 min",
    "category": "práce",
    "analysis": "Report přímo ovlivňuje hodnocení týmu.",
    "actionPlan": ["a", "b"],
}


class FakeTranscriber(TranscriptionClientInterface):
    def __init__(self, transcript: str = "zavolat mámě", error: Exception | None = None) -> None:
        self.transcript = transcript
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    async def transcribe(self, audio_bytes: bytes, *, language_code: str) -> str:
        self.calls.append((audio_bytes, language_code))
        if self.error is not None:
            raise self.error
        return self.transcript


class FakeGenerator(GenerationClientInterface):
    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.reply = json.dumps(VALID_REPLY, ensure_ascii=False) if reply is None else reply
        self.error = error
        self.calls: list[tuple[str, float]] = []

    async def generate(self, prompt: str, *, temperature: float) -> str:
        self.calls.append((prompt, temperature))
        if self.error is not None:
            raise self.error
        return self.reply


class FakeMailer(NotificationDispatcherInterface):
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[dict[str, str]] = []

    async def send(self, *, recipient: str, subject: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append({"recipient": recipient, "subject": subject, "body": body})


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def schema():
    return EXTENDED_SCHEMA


@pytest.fixture
def orchestrator(schema, transcriber, generator, mailer) -> TaskAnalysisOrchestrator:
    return TaskAnalysisOrchestrator(
        transcriber=transcriber,
        engine=AnalysisEngine(generator, schema),
        mailer=mailer,
    )


@pytest.fixture
def client(orchestrator):
    """Bypass the startup wiring so no AWS or SMTP client is ever created."""

    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def basic_client(transcriber, generator, mailer):
    basic = TaskAnalysisOrchestrator(
        transcriber=transcriber,
        engine=AnalysisEngine(generator, BASIC_SCHEMA),
        mailer=mailer,
    )
    app.dependency_overrides[get_orchestrator] = lambda: basic
    yield TestClient(app)
    app.dependency_overrides.clear()
