"""High-level orchestration map for the task analysis pipeline.

The canonical execution order of ``POST /api/process-voice``:

1. ``ingestion`` – decode audio and transcribe it, or take the typed text.
2. ``prompts`` – embed the canonical text in the fixed heuristic instructions.
3. ``engine`` – call the generation service once and validate the JSON reply.
4. ``notification`` – render the e-mail subject and body.
5. ``orchestrator`` – deliver the e-mail when the caller supplied an address.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the analysis pipeline."""

    order: int
    name: str
    module: str
    summary: str


class TaskAnalysisPipeline:
    """Utility wrapper for documenting the `/api/process-voice` flow."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Input Normalization",
            "app.pipelines.analysis.ingestion",
            "Decode base64 audio and transcribe it, or accept typed text verbatim.",
        ),
        PipelineStage(
            2,
            "Prompt Assembly",
            "app.pipelines.analysis.prompts",
            "Render the Pareto/Zeigarnik/championship instruction block for the variant.",
        ),
        PipelineStage(
            3,
            "Analysis",
            "app.pipelines.analysis.engine",
            "Call Bedrock once, strip code fences and validate the TaskAnalysis schema.",
        ),
        PipelineStage(
            4,
            "Notification Formatting",
            "app.pipelines.analysis.notification",
            "Render the priority marker, action plan and rationale into an e-mail.",
        ),
        PipelineStage(
            5,
            "Dispatch",
            "app.pipelines.analysis.orchestrator",
            "Send the e-mail over SMTP when userEmail is present.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)


__all__ = ["TaskAnalysisPipeline", "PipelineStage"]
