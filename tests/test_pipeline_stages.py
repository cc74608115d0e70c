"""Stage-level tests for ingestion, the analysis engine and the orchestrator."""

from __future__ import annotations

import asyncio
import base64

import pytest

from app.domain.errors import (
    AnalysisError,
    AnalysisErrorKind,
    DispatchError,
    DispatchErrorKind,
    InputError,
    InputErrorKind,
    TranscriptionError,
    TranscriptionErrorKind,
)
from app.domain.models import BASIC_SCHEMA, EXTENDED_SCHEMA, InputSource
from app.pipelines.analysis import (
    AnalysisEngine,
    TaskAnalysisOrchestrator,
    build_analysis_prompt,
    normalize_input,
)

from conftest import FakeGenerator, FakeMailer, FakeTranscriber


def normalize(**kwargs):
    kwargs.setdefault("audio_base64", None)
    kwargs.setdefault("text", None)
    kwargs.setdefault("schema", EXTENDED_SCHEMA)
    kwargs.setdefault("transcriber", FakeTranscriber())
    kwargs.setdefault("language_code", "cs-CZ")
    return asyncio.run(normalize_input(**kwargs))


class TestInputNormalization:
    def test_text_is_used_verbatim(self):
        transcriber = FakeTranscriber()

        canonical = normalize(text="  koupit mléko ", transcriber=transcriber)

        assert canonical.text == "  koupit mléko "
        assert canonical.source is InputSource.TYPED
        assert transcriber.calls == []

    def test_audio_is_decoded_and_transcribed(self):
        transcriber = FakeTranscriber(transcript=" zaplatit nájem ")
        audio = base64.b64encode(b"\x00\x01audio").decode("ascii")

        canonical = normalize(audio_base64=audio, transcriber=transcriber, language_code="cs-CZ")

        assert canonical.text == "zaplatit nájem"
        assert canonical.source is InputSource.SPOKEN
        assert transcriber.calls == [(b"\x00\x01audio", "cs-CZ")]

    def test_data_url_prefix_is_accepted(self):
        transcriber = FakeTranscriber()
        audio = "data:audio/wav;base64," + base64.b64encode(b"wav").decode("ascii")

        normalize(audio_base64=audio, transcriber=transcriber)

        assert transcriber.calls[0][0] == b"wav"

    def test_missing_input(self):
        with pytest.raises(InputError) as excinfo:
            normalize()
        assert excinfo.value.kind is InputErrorKind.MISSING
        assert excinfo.value.status_code == 400

    def test_audio_not_accepted_by_basic_variant(self):
        audio = base64.b64encode(b"audio").decode("ascii")

        with pytest.raises(InputError) as excinfo:
            normalize(audio_base64=audio, schema=BASIC_SCHEMA)
        assert excinfo.value.kind is InputErrorKind.UNSUPPORTED

    def test_basic_variant_falls_back_to_text(self):
        audio = base64.b64encode(b"audio").decode("ascii")
        transcriber = FakeTranscriber()

        canonical = normalize(audio_base64=audio, text="umýt auto", schema=BASIC_SCHEMA, transcriber=transcriber)

        assert canonical.text == "umýt auto"
        assert transcriber.calls == []

    def test_empty_transcript_fails(self):
        audio = base64.b64encode(b"silence").decode("ascii")

        with pytest.raises(TranscriptionError) as excinfo:
            normalize(audio_base64=audio, transcriber=FakeTranscriber(transcript="  "))
        assert excinfo.value.kind is TranscriptionErrorKind.EMPTY

    def test_transcriber_failure_is_wrapped(self):
        audio = base64.b64encode(b"audio").decode("ascii")
        boom = ConnectionError("network down")

        with pytest.raises(TranscriptionError) as excinfo:
            normalize(audio_base64=audio, transcriber=FakeTranscriber(error=boom))
        assert excinfo.value.kind is TranscriptionErrorKind.UPSTREAM
        assert excinfo.value.__cause__ is boom


class SlowGenerator(FakeGenerator):
    async def generate(self, prompt: str, *, temperature: float) -> str:
        await asyncio.sleep(1)
        return await super().generate(prompt, temperature=temperature)


class TestAnalysisEngine:
    def test_prompt_embeds_text_and_demands_json(self):
        prompt = build_analysis_prompt('napsat "report"', EXTENDED_SCHEMA)

        assert 'Uživatel nadiktoval úkol: "napsat "report""' in prompt
        assert "Odpověz pouze JSON, bez dalšího textu." in prompt
        assert "práce/osobní/zdraví/finance/učení" in prompt
        assert '"paretoSquared"' in prompt
        assert prompt == build_analysis_prompt('napsat "report"', EXTENDED_SCHEMA)

    def test_basic_prompt_omits_extended_fields(self):
        prompt = build_analysis_prompt("x", BASIC_SCHEMA)

        assert "práce/osobní/zdraví/finance\"" in prompt
        assert "paretoSquared" not in prompt
        assert "championshipVsGame" not in prompt
        assert '"actionPlan": ["krok 1", "krok 2", "krok 3"]\n}' in prompt

    def test_single_call_with_configured_temperature(self):
        generator = FakeGenerator()
        engine = AnalysisEngine(generator, EXTENDED_SCHEMA, temperature=0.1)

        analysis = asyncio.run(engine.analyze("napsat report"))

        assert analysis.priority == 5
        assert len(generator.calls) == 1
        assert generator.calls[0][1] == 0.1

    def test_upstream_failure_is_not_retried(self):
        generator = FakeGenerator(error=RuntimeError("throttled"))
        engine = AnalysisEngine(generator, EXTENDED_SCHEMA)

        with pytest.raises(AnalysisError) as excinfo:
            asyncio.run(engine.analyze("x"))

        assert excinfo.value.kind is AnalysisErrorKind.UPSTREAM_FAILURE
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert len(generator.calls) == 1

    def test_timeout_is_upstream_failure(self):
        engine = AnalysisEngine(SlowGenerator(), EXTENDED_SCHEMA, timeout=0.01)

        with pytest.raises(AnalysisError) as excinfo:
            asyncio.run(engine.analyze("x"))

        assert excinfo.value.kind is AnalysisErrorKind.UPSTREAM_FAILURE

    def test_empty_reply_is_malformed(self):
        engine = AnalysisEngine(FakeGenerator(reply="   "), EXTENDED_SCHEMA)

        with pytest.raises(AnalysisError) as excinfo:
            asyncio.run(engine.analyze("x"))

        assert excinfo.value.kind is AnalysisErrorKind.MALFORMED_RESPONSE


class TestOrchestrator:
    def build(self, **overrides):
        parts = {
            "transcriber": FakeTranscriber(),
            "generator": FakeGenerator(),
            "mailer": FakeMailer(),
        }
        parts.update(overrides)
        orchestrator = TaskAnalysisOrchestrator(
            transcriber=parts["transcriber"],
            engine=AnalysisEngine(parts["generator"], EXTENDED_SCHEMA),
            mailer=parts["mailer"],
        )
        return orchestrator, parts

    def test_dispatch_skipped_without_address(self):
        orchestrator, parts = self.build()

        result = asyncio.run(orchestrator.run(text="napsat report"))

        assert result.dispatched is False
        assert parts["mailer"].sent == []
        assert result.notification.subject.startswith("🔥")

    def test_dispatch_with_address(self):
        orchestrator, parts = self.build()

        result = asyncio.run(orchestrator.run(text="napsat report", user_email="a@b.cz"))

        assert result.dispatched is True
        assert parts["mailer"].sent[0]["body"] == result.notification.body

    def test_transport_failure_is_wrapped(self):
        orchestrator, _ = self.build(mailer=FakeMailer(error=OSError("connection refused")))

        with pytest.raises(DispatchError) as excinfo:
            asyncio.run(orchestrator.run(text="napsat report", user_email="a@b.cz"))

        assert excinfo.value.kind is DispatchErrorKind.TRANSPORT

    def test_failure_short_circuits_later_stages(self):
        orchestrator, parts = self.build(generator=FakeGenerator(reply="{}"))

        with pytest.raises(AnalysisError) as excinfo:
            asyncio.run(orchestrator.run(text="napsat report", user_email="a@b.cz"))

        assert excinfo.value.kind is AnalysisErrorKind.SCHEMA_VIOLATION
        assert parts["mailer"].sent == []
