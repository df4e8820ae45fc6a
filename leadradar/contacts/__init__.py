"""Contact channel preferences, dedup and handle normalization."""

from .channel_preference import (
    decide_new_channel_preference,
    get_preferred_channel,
    parse_channel_preference,
    serialize_channel_preference,
)
from .dedupe import ContactDedupWhere, ContactHandles, build_contact_dedup_where, merge_contact_fields

__all__ = [
    "ContactDedupWhere",
    "ContactHandles",
    "build_contact_dedup_where",
    "decide_new_channel_preference",
    "get_preferred_channel",
    "merge_contact_fields",
    "parse_channel_preference",
    "serialize_channel_preference",
]
