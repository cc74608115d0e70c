"""Construction of the process-wide collaborator clients.

Called once from the application lifespan; the resulting orchestrator is
stored on ``app.state`` and shared read-only across requests.
"""

from app.domain.models import get_schema
from app.pipelines.analysis import AnalysisEngine, TaskAnalysisOrchestrator
from app.services.email import SmtpMailer
from app.services.llm_client import BedrockLlmClient
from app.services.transcribe import TranscribeService

from .settings import Settings


def build_orchestrator(settings: Settings) -> TaskAnalysisOrchestrator:
    """Wire Bedrock, Transcribe and SMTP into one orchestrator"""

    pipeline = settings.pipeline
    schema = get_schema(pipeline.variant)

    generator = BedrockLlmClient(
        settings.bedrock,
        read_timeout=pipeline.generation_timeout_seconds,
    )
    engine = AnalysisEngine(
        generator,
        schema,
        temperature=pipeline.temperature,
        timeout=pipeline.generation_timeout_seconds,
    )

    return TaskAnalysisOrchestrator(
        transcriber=TranscribeService(settings.transcribe),
        engine=engine,
        mailer=SmtpMailer(settings.mail, timeout=pipeline.dispatch_timeout_seconds),
        language_code=settings.transcribe.language_code,
        transcription_timeout=pipeline.transcription_timeout_seconds,
        dispatch_timeout=pipeline.dispatch_timeout_seconds,
    )
