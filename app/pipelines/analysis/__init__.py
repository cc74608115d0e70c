"""Task analysis pipeline package.

Modules are organised by the order in which `/api/process-voice` executes:

1. `ingestion` – audio or text into canonical text.
2. `prompts` – the fixed instruction block for the generation service.
3. `engine` – generation call plus schema validation.
4. `notification` – e-mail subject/body rendering.
5. `orchestrator` – sequencing, short-circuiting and dispatch.
"""

from .engine import AnalysisEngine
from .flow import PipelineStage, TaskAnalysisPipeline
from .ingestion import decode_audio, normalize_input
from .notification import priority_marker, render_notification
from .orchestrator import TaskAnalysisOrchestrator
from .prompts import build_analysis_prompt

__all__ = [
    "AnalysisEngine",
    "PipelineStage",
    "TaskAnalysisOrchestrator",
    "TaskAnalysisPipeline",
    "build_analysis_prompt",
    "decode_audio",
    "normalize_input",
    "priority_marker",
    "render_notification",
]
