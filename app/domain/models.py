"""Domain models for the task analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

SUGGESTED_DATETIME_FORMAT = "%Y-%m-%d %H:%M"
EXTENDED_FIELDS = ("paretoSquared", "championshipVsGame")


class InputSource(str, Enum):
    SPOKEN = "spoken"
    TYPED = "typed"


@dataclass(frozen=True)
class CanonicalInput:
    """The single text string fed into analysis, plus where it came from."""

    text: str
    source: InputSource


@dataclass(frozen=True)
class AnalysisSchema:
    """Capability/schema configuration for one pipeline variant.

    ``basic`` is the text-only variant; ``extended`` also accepts audio and
    asks the model for the Pareto² and championship-vs-game sections.
    """

    name: str
    categories: tuple[str, ...]
    extended_fields: bool
    accepts_audio: bool
    text_field: str

    def canonical_category(self, value: str) -> Optional[str]:
        lowered = value.strip().lower()
        for category in self.categories:
            if category.lower() == lowered:
                return category
        return None


BASIC_SCHEMA = AnalysisSchema(
    name="basic",
    categories=("práce", "osobní", "zdraví", "finance"),
    extended_fields=False,
    accepts_audio=False,
    text_field="text",
)

EXTENDED_SCHEMA = AnalysisSchema(
    name="extended",
    categories=("práce", "osobní", "zdraví", "finance", "učení"),
    extended_fields=True,
    accepts_audio=True,
    text_field="transcription",
)

_SCHEMAS = {schema.name: schema for schema in (BASIC_SCHEMA, EXTENDED_SCHEMA)}


def get_schema(name: str) -> AnalysisSchema:
    try:
        return _SCHEMAS[name]
    except KeyError:
        raise ValueError(f"Unknown pipeline variant: {name!r}") from None


def _require_text(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("must not be blank")
    return cleaned


class TaskAnalysis(BaseModel):
    """Validated prioritization of a single task.

    Built once per request from the generation reply and never mutated.
    Pass ``context={"schema": AnalysisSchema}`` to ``model_validate`` to
    enforce the variant's category set and optional sections.
    """

    priority: int = Field(ge=1, le=5, strict=True)
    is_pareto_task: bool = Field(alias="isParetoTask", strict=True)
    first_step: str = Field(alias="firstStep")
    time_estimate: str = Field(alias="timeEstimate")
    category: str
    needs_calendar_event: bool = Field(default=False, alias="needsCalendarEvent", strict=True)
    suggested_date_time: Optional[str] = Field(default=None, alias="suggestedDateTime")
    analysis: str
    action_plan: List[str] = Field(alias="actionPlan", min_length=1)
    pareto_squared: Optional[str] = Field(default=None, alias="paretoSquared")
    championship_vs_game: Optional[str] = Field(default=None, alias="championshipVsGame")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def apply_variant_rules(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        payload = dict(data)
        schema = _schema_from(info)
        if schema is not None and not schema.extended_fields:
            for key in EXTENDED_FIELDS:
                payload.pop(key, None)
        if not payload.get("needsCalendarEvent", payload.get("needs_calendar_event")):
            payload.pop("suggestedDateTime", None)
            payload.pop("suggested_date_time", None)
        return payload

    @field_validator("first_step", "time_estimate", "analysis")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("pareto_squared", "championship_vs_game")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("action_plan")
    @classmethod
    def steps_not_blank(cls, value: List[str]) -> List[str]:
        return [_require_text(step) for step in value]

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str, info: ValidationInfo) -> str:
        schema = _schema_from(info) or EXTENDED_SCHEMA
        canonical = schema.canonical_category(value)
        if canonical is None:
            allowed = ", ".join(schema.categories)
            raise ValueError(f"must be one of: {allowed}")
        return canonical

    @field_validator("suggested_date_time")
    @classmethod
    def datetime_format(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        if not cleaned:
            return None
        parsed = datetime.strptime(cleaned, SUGGESTED_DATETIME_FORMAT)
        # strptime tolerates missing zero padding
        if parsed.strftime(SUGGESTED_DATETIME_FORMAT) != cleaned:
            raise ValueError("must use the YYYY-MM-DD HH:MM format")
        return cleaned

    def to_payload(self, schema: AnalysisSchema) -> dict[str, Any]:
        """Serialize with wire (camelCase) names, dropping sections the variant lacks."""

        exclude = None if schema.extended_fields else {"pareto_squared", "championship_vs_game"}
        return self.model_dump(by_alias=True, exclude=exclude)


def _schema_from(info: ValidationInfo) -> Optional[AnalysisSchema]:
    context = info.context
    if isinstance(context, dict):
        schema = context.get("schema")
        if isinstance(schema, AnalysisSchema):
            return schema
    return None


@dataclass(frozen=True)
class NotificationMessage:
    subject: str
    body: str


@dataclass(frozen=True)
class PipelineResult:
    """Everything one request produced, in stage order."""

    canonical: CanonicalInput
    analysis: TaskAnalysis
    notification: NotificationMessage
    dispatched: bool
