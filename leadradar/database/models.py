from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from leadradar.core.enums import (
    OpportunityStatus,
    ProjectStatus,
    StepStatus,
    UserPlan,
    UserRole,
)
from leadradar.utils.clock import utcnow_naive
from leadradar.utils.ids import new_id

from .db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, nullable=False, unique=True, index=True)
    name = Column(String)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=UserRole.MEMBER.value)
    plan = Column(String, nullable=False, default=UserPlan.FREE.value)
    # JSON: {"name", "website", "oneLiner", ..., "referenceAccounts"} describing who the user sells for.
    representing_project = Column(Text)
    # JSON: {"tone", "length", "formality"} applied to generated outreach.
    ai_voice = Column(Text)
    created_at = Column(DateTime, default=utcnow_naive)

    icp_profile = relationship("ICPProfile", back_populates="user", uselist=False)
    playbooks = relationship("Playbook", back_populates="user")
    projects = relationship("Project", back_populates="user")


class ICPProfile(Base):
    __tablename__ = "icp_profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True)
    industries = Column(Text)
    pain_points = Column(Text)
    filters = Column(Text)
    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    user = relationship("User", back_populates="icp_profile")


class Playbook(Base):
    __tablename__ = "playbooks"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    boosts = Column(Text)
    penalties = Column(Text)
    created_at = Column(DateTime, default=utcnow_naive)

    user = relationship("User", back_populates="playbooks")


class WatchlistUrl(Base):
    __tablename__ = "watchlist_urls"
    __table_args__ = (UniqueConstraint("user_id", "url", name="uq_watchlist_user_url"),)

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    url = Column(String, nullable=False)
    label = Column(String)
    created_at = Column(DateTime, default=utcnow_naive)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        Index("idx_projects_user_status", "user_id", "status"),
        UniqueConstraint("user_id", "url", name="uq_projects_user_url"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    url = Column(String, nullable=False)
    name = Column(String, nullable=False)
    status = Column(String, nullable=False, default=ProjectStatus.NOT_CONTACTED.value)
    summary = Column(Text)
    category_tags = Column(Text)
    stage = Column(String)
    target_users = Column(Text)
    pain_points = Column(Text)
    icp_score = Column(Integer)
    icp_explanation = Column(Text)
    mqa_score = Column(Integer)
    mqa_reasons = Column(Text)
    bd_angles = Column(Text)
    playbook_summary = Column(Text)
    playbook_personas = Column(Text)
    playbook_angles = Column(Text)
    twitter = Column(String)
    telegram = Column(String)
    discord = Column(String)
    github = Column(String)
    medium = Column(String)
    next_follow_up_at = Column(DateTime)
    last_contact_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    user = relationship("User", back_populates="projects")
    contacts = relationship("Contact", back_populates="project")
    sequences = relationship("Sequence", back_populates="project")
    notes = relationship("Note", back_populates="project")


class Contact(Base):
    __tablename__ = "contacts"
    __table_args__ = (Index("idx_contacts_project", "project_id"),)

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False)
    name = Column(String, nullable=False)
    role = Column(String)
    linkedin_url = Column(String)
    twitter_handle = Column(String)
    telegram = Column(String)
    email = Column(String)
    persona = Column(String)
    channel_preference = Column(String)
    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    project = relationship("Project", back_populates="contacts")


class Opportunity(Base):
    __tablename__ = "opportunities"
    __table_args__ = (
        Index("idx_opportunities_user_status", "user_id", "status"),
        UniqueConstraint("user_id", "url", name="uq_opportunities_user_url"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    url = Column(String, nullable=False)
    source_type = Column(String, nullable=False)
    source_label = Column(String)
    raw_context = Column(Text)
    title = Column(String)
    tags = Column(Text)
    icp_score = Column(Integer)
    mqa_score = Column(Integer)
    bd_angles = Column(Text)
    lead_score = Column(Integer)
    lead_reasons = Column(Text)
    signal_strength = Column(Integer)
    playbook_matches = Column(Text)
    icp_profile_id = Column(String(36), ForeignKey("icp_profiles.id"))
    next_review_at = Column(DateTime)
    status = Column(String, nullable=False, default=OpportunityStatus.NEW.value)
    project_id = Column(String(36), ForeignKey("projects.id"))
    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    project = relationship("Project")


class Sequence(Base):
    __tablename__ = "sequences"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    contact_id = Column(String(36), ForeignKey("contacts.id"))
    playbook_id = Column(String(36), ForeignKey("playbooks.id"))
    created_at = Column(DateTime, default=utcnow_naive)

    project = relationship("Project", back_populates="sequences")
    contact = relationship("Contact")
    steps = relationship("SequenceStep", back_populates="sequence", order_by="SequenceStep.step_number")


class SequenceStep(Base):
    __tablename__ = "sequence_steps"
    __table_args__ = (
        Index("idx_sequence_steps_status_scheduled", "status", "scheduled_at"),
        UniqueConstraint("sequence_id", "step_number", name="uq_sequence_steps_number"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    sequence_id = Column(String(36), ForeignKey("sequences.id"), nullable=False)
    step_number = Column(Integer, nullable=False)
    channel = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default=StepStatus.PENDING.value)
    scheduled_at = Column(DateTime)
    sent_at = Column(DateTime)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=utcnow_naive)

    sequence = relationship("Sequence", back_populates="steps")


class Interaction(Base):
    __tablename__ = "interactions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    contact_id = Column(String(36), ForeignKey("contacts.id"))
    sequence_step_id = Column(String(36), ForeignKey("sequence_steps.id"))
    channel = Column(String, nullable=False)
    direction = Column(String, nullable=False, default="OUTBOUND")
    title = Column(String)
    content = Column(Text)
    occurred_at = Column(DateTime, default=utcnow_naive)


class OutreachMessage(Base):
    __tablename__ = "outreach_messages"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    contact_id = Column(String(36), ForeignKey("contacts.id"), nullable=False)
    channel = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow_naive)


class Note(Base):
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow_naive)

    project = relationship("Project", back_populates="notes")
