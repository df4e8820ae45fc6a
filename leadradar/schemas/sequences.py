"""Sequence step schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from leadradar.core.enums import StepAction


class SequenceStepResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sequence_id: str
    step_number: int
    channel: str
    content: str
    status: str
    scheduled_at: datetime | None = None
    sent_at: datetime | None = None
    version: int


class NextStepResponse(BaseModel):
    step: SequenceStepResponse | None = None
    project_id: str | None = None
    project_name: str | None = None
    contact_id: str | None = None
    contact_name: str | None = None


class StepActionRequest(BaseModel):
    step_id: str = Field(min_length=1)
    action: StepAction
    scheduled_at: datetime | None = None
    version: int | None = Field(default=None, ge=1)


class StepActionResponse(BaseModel):
    success: bool = True
    step: SequenceStepResponse
    next_follow_up_at: datetime | None = None
