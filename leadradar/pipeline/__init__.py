"""Pipeline board helpers: step due metadata and priority ordering."""

from .priority import compare_projects, sort_projects_by_priority
from .step_meta import ProjectStepMeta, build_step_meta

__all__ = ["ProjectStepMeta", "build_step_meta", "compare_projects", "sort_projects_by_priority"]
