"""Session model: the open tabs, persisted across application restarts"""

from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class SessionTab(BaseModel):
    """State of one tab. Drafts carry their workspace images as base64."""

    id: str
    file_path: Path | None = None
    title: str = ""
    content: list[dict[str, Any]] = Field(default_factory=list)
    temp_image_data: dict[str, str] = Field(default_factory=dict)


class SessionData(BaseModel):
    """All open tabs, their order and the active one"""

    tabs: list[SessionTab] = Field(default_factory=list)
    tab_order: list[str] = Field(default_factory=list)
    active_tab_id: str | None = None
    saved_at: datetime = Field(default_factory=datetime.now)
