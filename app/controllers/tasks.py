"""Task analysis endpoint.

For a stage-by-stage map see `app.pipelines.analysis.flow.TaskAnalysisPipeline`.
`POST /api/process-voice` performs:

1. Transcription of `audioBase64` (extended variant) or pass-through of `text`.
2. Single-shot AI analysis validated against the variant schema.
3. E-mail notification when `userEmail` is present.

The route answers CORS preflights itself; no CORS middleware sits in front of it.
"""

import json
import logging
import traceback
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from app.config.settings import settings
from app.controllers.dependencies import OrchestratorDep
from app.domain.errors import InputError, PipelineError
from app.views import ErrorResponse, ProcessTaskRequest, ProcessTaskResponse

router = APIRouter(prefix="/api", tags=["tasks"])

logger = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD", "TRACE", "CONNECT"]


def _allowed_origin(request: Request) -> str:
    """Pick the single value for ``Access-Control-Allow-Origin``."""

    origins = settings.cors_origins
    if "*" in origins or not origins:
        return "*"
    origin = request.headers.get("origin")
    if origin in origins:
        return origin
    return origins[0]


def _cors_headers(request: Request) -> dict[str, str]:
    headers = {
        "Access-Control-Allow-Origin": _allowed_origin(request),
        "Access-Control-Allow-Methods": ", ".join(settings.cors_allow_methods),
        "Access-Control-Allow-Headers": ", ".join(settings.cors_allow_headers),
    }
    if headers["Access-Control-Allow-Origin"] != "*":
        headers["Vary"] = "Origin"
    return headers


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    exc: BaseException | None = None,
) -> JSONResponse:
    stack = None
    if exc is not None and settings.debug:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    body = ErrorResponse(error=message, stack=stack).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=_cors_headers(request))


async def _read_payload(request: Request) -> dict[str, Any]:
    """Decode the JSON body; anything that is not an object counts as empty."""

    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Request body is not valid JSON")
        return {}
    return payload if isinstance(payload, dict) else {}


@router.api_route("/process-voice", methods=_ALL_METHODS, response_model=None)
async def process_voice(request: Request, orchestrator: OrchestratorDep) -> Response:
    """Analyze a spoken or typed task and optionally e-mail the result."""

    if request.method == "OPTIONS":
        request.state.pipeline_outcome = "preflight"
        return Response(status_code=status.HTTP_200_OK, headers=_cors_headers(request))

    if request.method != "POST":
        request.state.pipeline_outcome = "method_not_allowed"
        return _error_response(request, status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")

    try:
        payload = ProcessTaskRequest.model_validate(await _read_payload(request))
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        logger.warning("Invalid request body fields=%s", fields)
        request.state.pipeline_outcome = "invalid_request"
        return _error_response(request, status.HTTP_400_BAD_REQUEST, f"Neplatný požadavek: {fields}")

    try:
        result = await orchestrator.run(
            audio_base64=payload.audio_base64,
            text=payload.text,
            user_email=payload.user_email,
        )
    except InputError as exc:
        logger.warning("Rejected request kind=%s: %s", exc.kind.value, exc.message)
        request.state.pipeline_outcome = f"{exc.stage.value}:{exc.kind.value}"
        return _error_response(request, exc.status_code, str(exc))
    except PipelineError as exc:
        logger.exception("Pipeline failed stage=%s kind=%s", exc.stage.value, exc.kind.value)
        request.state.pipeline_outcome = f"{exc.stage.value}:{exc.kind.value}"
        return _error_response(request, exc.status_code, str(exc), exc)
    except Exception as exc:
        logger.exception("Unexpected pipeline failure")
        request.state.pipeline_outcome = "unexpected"
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", exc)

    request.state.pipeline_outcome = "success"
    schema = orchestrator.schema
    body = ProcessTaskResponse(
        analysis=result.analysis.to_payload(schema),
        **{schema.text_field: result.canonical.text},
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=body.model_dump(),
        headers=_cors_headers(request),
    )
