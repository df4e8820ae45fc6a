"""Opportunity lead scoring."""

from .scoring import MAX_LEAD_REASONS, LeadScore, score_opportunity

__all__ = ["LeadScore", "MAX_LEAD_REASONS", "score_opportunity"]
