"""Contact capture schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class QuickCaptureRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    role: str | None = Field(default=None, max_length=255)
    project_id: str | None = None
    project_url: str | None = Field(default=None, max_length=2048)
    company_name: str | None = Field(default=None, max_length=255)
    linkedin_url: str | None = Field(default=None, max_length=2048)
    twitter: str | None = Field(default=None, max_length=2048)
    telegram: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    notes: str | None = Field(default=None, max_length=10000)


class QuickCaptureResponse(BaseModel):
    project_id: str
    project_name: str
    contact_id: str
    contact_name: str
    created: bool
