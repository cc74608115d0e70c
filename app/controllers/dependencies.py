"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.pipelines.analysis import TaskAnalysisOrchestrator


def get_orchestrator(request: Request) -> TaskAnalysisOrchestrator:
    """Return the orchestrator built at startup."""

    return request.app.state.orchestrator


OrchestratorDep = Annotated[TaskAnalysisOrchestrator, Depends(get_orchestrator)]


__all__ = ["get_orchestrator", "OrchestratorDep"]
