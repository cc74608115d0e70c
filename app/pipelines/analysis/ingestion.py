"""Input normalization (Stage 01): audio or text to canonical text."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging

from app.application.interfaces import TranscriptionClientInterface
from app.domain.errors import (
    InputError,
    InputErrorKind,
    TranscriptionError,
    TranscriptionErrorKind,
)
from app.domain.models import AnalysisSchema, CanonicalInput, InputSource

logger = logging.getLogger("app.services.analysis_pipeline")

MISSING_INPUT_MESSAGE = "Potřebujeme buď audio nebo text"
AUDIO_UNSUPPORTED_MESSAGE = "Tato varianta přijímá pouze text"


def decode_audio(audio_base64: str) -> bytes:
    """Decode the transport (base64) encoding of an uploaded recording."""

    payload = audio_base64.strip()
    # Accept data URLs produced by browser recorders.
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        audio_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise TranscriptionError(
            TranscriptionErrorKind.DECODE, f"Audio is not valid base64: {exc}"
        ) from exc
    if not audio_bytes:
        raise TranscriptionError(
            TranscriptionErrorKind.EMPTY, "Decoded audio payload is empty."
        )
    return audio_bytes


async def normalize_input(
    *,
    audio_base64: str | None,
    text: str | None,
    schema: AnalysisSchema,
    transcriber: TranscriptionClientInterface,
    language_code: str,
    timeout: float | None = None,
) -> CanonicalInput:
    """Return the canonical text for one request.

    Audio wins over text when the variant accepts it. Blank strings count as
    absent, so an empty submission never reaches the generation service.
    """

    has_audio = bool(audio_base64 and audio_base64.strip())
    has_text = bool(text and text.strip())

    if has_audio and schema.accepts_audio:
        audio_bytes = decode_audio(audio_base64)
        logger.info("Transcribing %s bytes of audio language=%s", len(audio_bytes), language_code)
        try:
            transcript = await asyncio.wait_for(
                transcriber.transcribe(audio_bytes, language_code=language_code),
                timeout=timeout,
            )
        except TranscriptionError:
            raise
        except asyncio.TimeoutError as exc:
            raise TranscriptionError(
                TranscriptionErrorKind.UPSTREAM,
                f"Transcription timed out after {timeout}s.",
            ) from exc
        except Exception as exc:
            raise TranscriptionError(
                TranscriptionErrorKind.UPSTREAM,
                f"Chyba při převodu audio na text: {exc}",
            ) from exc

        if not transcript or not transcript.strip():
            raise TranscriptionError(
                TranscriptionErrorKind.EMPTY, "Transcription returned no text."
            )
        return CanonicalInput(text=transcript.strip(), source=InputSource.SPOKEN)

    if has_text:
        return CanonicalInput(text=text, source=InputSource.TYPED)

    if has_audio:
        raise InputError(InputErrorKind.UNSUPPORTED, AUDIO_UNSUPPORTED_MESSAGE)

    raise InputError(InputErrorKind.MISSING, MISSING_INPUT_MESSAGE)


__all__ = ["MISSING_INPUT_MESSAGE", "decode_audio", "normalize_input"]
