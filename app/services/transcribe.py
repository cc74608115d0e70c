"""Amazon Transcribe integration helpers using Streaming API."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import tempfile

from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import TranscriptionClientInterface
from app.config.settings import TranscribeConfig
from app.domain.errors import TranscriptionError, TranscriptionErrorKind

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


class TranscribeService(TranscriptionClientInterface):
    """High-level facade for streaming audio to Amazon Transcribe."""

    def __init__(self, config: TranscribeConfig) -> None:
        self._config = config
        self._client = TranscribeStreamingClient(region=config.region)

    async def transcribe(self, audio_bytes: bytes, *, language_code: str) -> str:
        """Stream audio to Transcribe and return the full transcript."""

        if not audio_bytes:
            raise TranscriptionError(
                TranscriptionErrorKind.EMPTY, "The uploaded audio is empty."
            )

        pcm_data = await run_in_threadpool(self._convert_to_pcm, audio_bytes)

        try:
            stream = await self._client.start_stream_transcription(
                language_code=language_code,
                media_sample_rate_hz=self._config.sample_rate_hz,
                media_encoding="pcm",
            )
            handler = _SimpleTranscriptHandler(stream.output_stream)

            async def write_chunks() -> None:
                for i in range(0, len(pcm_data), _CHUNK_SIZE):
                    await stream.input_stream.send_audio_event(
                        audio_chunk=pcm_data[i : i + _CHUNK_SIZE]
                    )
                await stream.input_stream.end_stream()

            await asyncio.gather(write_chunks(), handler.handle_events())
        except Exception as exc:  # pragma: no cover - external dependency
            logger.error("Streaming transcription failed: %s", exc)
            raise TranscriptionError(
                TranscriptionErrorKind.UPSTREAM,
                f"Streaming transcription failed: {exc}",
            ) from exc

        logger.info("Transcription complete. Length: %s", len(handler.transcript))
        return handler.transcript.strip()

    def _convert_to_pcm(self, audio_bytes: bytes) -> bytes:
        """Synchronous ffmpeg conversion using a temporary file to support seeking."""

        with tempfile.NamedTemporaryFile(delete=False, suffix=".tmp") as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    self._config.ffmpeg_binary,
                    "-y",
                    "-i", tmp_path,
                    "-f", "s16le",
                    "-ac", "1",
                    "-ar", str(self._config.sample_rate_hz),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
        except (subprocess.CalledProcessError, OSError) as exc:
            stderr = getattr(exc, "stderr", None)
            error_msg = stderr.decode("utf-8", errors="replace") if stderr else str(exc)
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise TranscriptionError(
                TranscriptionErrorKind.DECODE,
                f"ffmpeg failed to convert audio to PCM: {error_msg}",
            ) from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        if not process.stdout:
            raise TranscriptionError(
                TranscriptionErrorKind.DECODE, "ffmpeg produced no audio samples."
            )
        return process.stdout


class _SimpleTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if not result.is_partial:
                for alt in result.alternatives:
                    self.transcript += alt.transcript + " "


__all__ = ["TranscribeService"]
