"""Settings and playbook schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leadradar.utils.validators import parse_string_list


class SettingsUpdateRequest(BaseModel):
    industries: str | None = Field(default=None, max_length=2000)
    pain_points: str | None = Field(default=None, max_length=4000)
    filters: dict[str, Any] | None = None
    ai_voice: dict[str, Any] | None = None
    # camelCase keys as stored: name, website, oneLiner, productCategory, ...
    representing_project: dict[str, Any] | None = None


class SettingsResponse(BaseModel):
    industries: str | None = None
    pain_points: str | None = None
    filters: dict[str, Any] | None = None
    ai_voice: dict[str, Any] | None = None
    representing_project: dict[str, Any] | None = None


class PlaybookRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=4000)
    boosts: list[str] = Field(default_factory=list, max_length=50)
    penalties: list[str] = Field(default_factory=list, max_length=50)


class PlaybookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    boosts: list[str] = Field(default_factory=list)
    penalties: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    @field_validator("boosts", "penalties", mode="before")
    @classmethod
    def _decode_json_list(cls, value):
        if isinstance(value, list):
            return value
        return parse_string_list(value)
