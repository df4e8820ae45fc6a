"""Outreach generation schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class OutreachGenerateRequest(BaseModel):
    project_id: str
    contact_id: str
    channels: list[str] = Field(min_length=1, max_length=4)
    custom_content: str | None = Field(default=None, max_length=10000)


class OutreachMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    contact_id: str
    channel: str
    content: str
    created_at: datetime | None = None
