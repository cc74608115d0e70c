"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse
from .tasks import ProcessTaskRequest, ProcessTaskResponse

__all__ = [
    "ErrorResponse",
    "ProcessTaskRequest",
    "ProcessTaskResponse",
]
