from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration for the text-generation collaborator."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="anthropic.claude-3-haiku-20240307-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=1024,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=4096,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    access_key: Optional[str] = Field(default=None, validation_alias="AWS_ACCESS_KEY_ID")
    secret_key: SecretStr | None = Field(
        default=None,
        validation_alias="AWS_SECRET_ACCESS_KEY",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class TranscribeConfig(BaseSettings):
    """Amazon Transcribe Streaming configuration."""

    region: str = "us-east-1"
    language_code: str = "cs-CZ"
    sample_rate_hz: int = Field(default=16000, ge=8000, le=48000)
    ffmpeg_binary: str = "ffmpeg"

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIBE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class MailConfig(BaseSettings):
    """SMTP settings used to deliver task notifications."""

    host: str = "smtp.gmail.com"
    port: int = 465
    username: Optional[str] = None
    password: SecretStr | None = None
    sender: Optional[str] = None
    use_ssl: bool = True
    use_tls: bool = False

    model_config = SettingsConfigDict(
        env_prefix="MAIL_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def from_address(self) -> Optional[str]:
        return self.sender or self.username

    def is_configured(self) -> bool:
        return bool(self.host and self.from_address)


class PipelineConfig(BaseSettings):
    """Knobs for the analysis pipeline itself."""

    variant: Literal["basic", "extended"] = "extended"
    temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    generation_timeout_seconds: float = Field(default=60.0, gt=0)
    transcription_timeout_seconds: float = Field(default=120.0, gt=0)
    dispatch_timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Pareto Task Analyzer"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/analysis_pipeline.log"

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # Transcribe
    transcribe: TranscribeConfig = Field(default_factory=TranscribeConfig)

    # Mail
    mail: MailConfig = Field(default_factory=MailConfig)

    # Pipeline
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_methods: list[str] = ["POST", "OPTIONS"]
    cors_allow_headers: list[str] = ["Content-Type"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
