"""Project request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leadradar.utils.validators import parse_string_list


class ProjectCreateRequest(BaseModel):
    url: str = Field(min_length=8, max_length=2048)
    name: str | None = Field(default=None, max_length=255)


class ProjectImportRow(BaseModel):
    url: str | None = None
    name: str | None = None


class ProjectImportRequest(BaseModel):
    rows: list[ProjectImportRow] = Field(default_factory=list, max_length=500)
    csv_text: str | None = Field(default=None, max_length=500000)


class ProjectSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    url: str
    status: str


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    url: str
    status: str
    summary: str | None = None
    category_tags: list[str] = Field(default_factory=list)
    stage: str | None = None
    target_users: str | None = None
    pain_points: str | None = None
    icp_score: int | None = None
    icp_explanation: str | None = None
    mqa_score: int | None = None
    mqa_reasons: str | None = None
    bd_angles: list[str] = Field(default_factory=list)
    playbook_summary: str | None = None
    playbook_personas: list[str] = Field(default_factory=list)
    playbook_angles: list[str] = Field(default_factory=list)
    twitter: str | None = None
    telegram: str | None = None
    discord: str | None = None
    github: str | None = None
    medium: str | None = None
    next_follow_up_at: datetime | None = None
    last_contact_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("category_tags", "bd_angles", "playbook_personas", "playbook_angles", mode="before")
    @classmethod
    def _decode_json_list(cls, value):
        if isinstance(value, list):
            return value
        return parse_string_list(value)


class BoardItem(BaseModel):
    project: ProjectSummary
    next_sequence_step_due_at: datetime | None = None
    has_overdue_sequence_step: bool = False
    overdue_count: int = 0


class ImportOutcomeResponse(BaseModel):
    row: int
    url: str | None = None
    status: str
    project_id: str | None = None
    detail: str | None = None


class ImportResponse(BaseModel):
    created: int
    duplicate: int
    invalid: int
    rows: list[ImportOutcomeResponse] = Field(default_factory=list)


class EnrichResponse(BaseModel):
    project: ProjectResponse
    icp_score: int
    icp_explanation: str


class AccountPlaybookResponse(BaseModel):
    summary: str
    recommended_personas: list[str] = Field(default_factory=list)
    primary_angles: list[str] = Field(default_factory=list)
    recommended_channels_by_persona: dict[str, list[str]] = Field(default_factory=dict)


class ProjectPlaybookResponse(BaseModel):
    project: ProjectResponse
    playbook: AccountPlaybookResponse
