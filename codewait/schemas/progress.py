"""
Session state schemas for CodeWait.

Defines:
- Application state (the top-level view the learner is in)
- Per-lesson session progress
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AppState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    LEARNING = "learning"
    SUMMARY = "summary"
    ERROR = "error"


class SessionProgress(BaseModel):
    """Ephemeral progress through one lesson. Reset whenever a lesson loads."""
    model_config = ConfigDict(validate_assignment=True)

    current_index: int = Field(default=0, ge=0)
    revealed: bool = False
    selected_option: Optional[str] = None
    score: int = Field(default=0, ge=0)
