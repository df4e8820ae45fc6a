"""Canonical status and type values shared by models, services and API schemas."""

from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MEMBER = "member"


class UserPlan(str, enum.Enum):
    FREE = "free"
    STARTER = "starter"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class ProjectStatus(str, enum.Enum):
    NOT_CONTACTED = "NOT_CONTACTED"
    CONTACTED = "CONTACTED"
    WAITING_REPLY = "WAITING_REPLY"
    CALL_BOOKED = "CALL_BOOKED"
    WON = "WON"
    LOST = "LOST"


class OpportunitySource(str, enum.Enum):
    TEXT_SCAN = "TEXT_SCAN"
    PAGE_SCAN = "PAGE_SCAN"
    WATCHLIST = "WATCHLIST"


class OpportunityStatus(str, enum.Enum):
    NEW = "NEW"
    SNOOZED = "SNOOZED"
    DISCARDED = "DISCARDED"
    CONVERTED = "CONVERTED"


class StepStatus(str, enum.Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    SKIPPED = "SKIPPED"


class StepAction(str, enum.Enum):
    SENT = "sent"
    SKIP = "skip"
    RESCHEDULE = "reschedule"


class Channel(str, enum.Enum):
    EMAIL = "email"
    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    TELEGRAM = "telegram"


PAID_PLANS = frozenset({UserPlan.STARTER.value, UserPlan.PRO.value, UserPlan.ENTERPRISE.value})
