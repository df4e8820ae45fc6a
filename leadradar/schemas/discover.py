"""Discovery and opportunity request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leadradar.utils.validators import parse_string_list


class ScanTextRequest(BaseModel):
    text: str = Field(min_length=1, max_length=50000)
    source_label: str | None = Field(default=None, max_length=255)


class ScanPageRequest(BaseModel):
    url: str = Field(min_length=8, max_length=2048)
    source_label: str | None = Field(default=None, max_length=255)


class SnoozeRequest(BaseModel):
    days: int | None = Field(default=None, ge=1, le=90)


class WatchlistCreateRequest(BaseModel):
    url: str = Field(min_length=8, max_length=2048)
    label: str | None = Field(default=None, max_length=255)


class WatchlistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    url: str
    label: str | None = None
    created_at: datetime | None = None


class OpportunityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    url: str
    source_type: str
    source_label: str | None = None
    title: str | None = None
    tags: list[str] = Field(default_factory=list)
    icp_score: int | None = None
    mqa_score: int | None = None
    bd_angles: list[str] = Field(default_factory=list)
    lead_score: int | None = None
    lead_reasons: list[str] = Field(default_factory=list)
    signal_strength: int | None = None
    playbook_matches: list[str] = Field(default_factory=list)
    status: str
    next_review_at: datetime | None = None
    project_id: str | None = None
    created_at: datetime | None = None

    @field_validator("tags", "bd_angles", "lead_reasons", "playbook_matches", mode="before")
    @classmethod
    def _decode_json_list(cls, value):
        if isinstance(value, list):
            return value
        return parse_string_list(value)


class ScanResponse(BaseModel):
    created_count: int
    skipped_count: int
    attempted: int
    failed: int = 0
    message: str | None = None
    created: list[OpportunityResponse] = Field(default_factory=list)
