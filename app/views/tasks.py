"""Schemas for task analysis requests and responses."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ProcessTaskRequest(BaseModel):
    audio_base64: Optional[str] = Field(default=None, alias="audioBase64")
    text: Optional[str] = None
    user_email: Optional[EmailStr] = Field(default=None, alias="userEmail")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProcessTaskResponse(BaseModel):
    """Success body; the text key is ``transcription`` or ``text`` per variant."""

    success: bool = True
    analysis: Dict[str, Any]

    model_config = ConfigDict(extra="allow")
