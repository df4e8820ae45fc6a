"""Outreach sequence step selection and status transitions."""

from .next_step import pick_next_sequence_step

__all__ = ["pick_next_sequence_step"]
