"""Per-user inputs every AI-backed operation needs: plan, ICP, playbooks, voice."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from leadradar.core.enums import ProjectStatus, UserPlan
from leadradar.database.models import ICPProfile, Playbook, Project, User
from leadradar.llm.types import ICPContext, RepresentingProject, parse_representing_project
from leadradar.utils.validators import parse_json_string

MAX_WON_REFERENCES = 5


@dataclass
class UserContext:
    user_id: str
    plan: str
    icp: ICPProfile | None = None
    representing: RepresentingProject | None = None
    voice_profile: dict[str, Any] | None = None
    playbooks: list[Playbook] = field(default_factory=list)

    @property
    def icp_context(self) -> ICPContext | None:
        if self.icp is None:
            return None
        filters = parse_json_string(self.icp.filters, fallback=None)
        return ICPContext(
            industries=self.icp.industries,
            pain_points=self.icp.pain_points,
            filters=filters if isinstance(filters, dict) else None,
        )


def load_user_context(db: Session, user_id: str) -> UserContext:
    """Read the caller's plan, ICP, playbooks and representing project.

    Won projects are appended to the representing project's reference
    accounts so prompts can cite them.
    """
    user = db.query(User).filter(User.id == user_id).first()
    icp = db.query(ICPProfile).filter(ICPProfile.user_id == user_id).first()
    playbooks = db.query(Playbook).filter(Playbook.user_id == user_id).order_by(Playbook.created_at).all()

    representing = parse_representing_project(user.representing_project if user else None)
    if representing is not None:
        won = (
            db.query(Project)
            .filter(Project.user_id == user_id, Project.status == ProjectStatus.WON.value)
            .limit(MAX_WON_REFERENCES)
            .all()
        )
        references = list(representing.reference_accounts)
        for project in won:
            label = project.name or project.url
            if label and label not in references:
                references.append(label)
        representing = dataclasses.replace(representing, reference_accounts=tuple(references))

    voice = parse_json_string(user.ai_voice if user else None, fallback=None)
    return UserContext(
        user_id=user_id,
        plan=(user.plan if user and user.plan else UserPlan.FREE.value),
        icp=icp,
        representing=representing,
        voice_profile=voice if isinstance(voice, dict) else None,
        playbooks=playbooks,
    )
