"""Per-contact channel usage counts and the preferred channel they imply.

Counts are stored on ``Contact.channel_preference`` as ``"email:2,telegram:1"``.
A legacy value holding a bare channel name (``"email"``) reads as one use of
that channel. Everything here is pure: the same input always yields the same
output and nothing is mutated in place.
"""

from __future__ import annotations

from collections.abc import Mapping

CHANNEL_WEIGHTS: dict[str, int] = {
    "email": 1,
    "linkedin": 1,
    "twitter": 1,
    "telegram": 1,
}


def parse_channel_preference(stored: str | None) -> dict[str, int]:
    """Decode the stored string into an ordered ``channel -> count`` mapping."""
    if not stored:
        return {}

    if ":" not in stored:
        channel = stored.strip()
        return {channel: 1} if channel else {}

    counts: dict[str, int] = {}
    for part in stored.split(","):
        channel, _, raw_count = part.partition(":")
        channel = channel.strip()
        if not channel or not raw_count.strip():
            continue
        try:
            count = int(raw_count.strip())
        except ValueError:
            continue
        if count > 0:
            counts[channel] = count
    return counts


def serialize_channel_preference(counts: Mapping[str, int]) -> str:
    """Encode counts, highest first; equal counts keep their mapping order."""
    positive = [(channel, count) for channel, count in counts.items() if count > 0]
    positive.sort(key=lambda item: item[1], reverse=True)
    return ",".join(f"{channel}:{count}" for channel, count in positive)


def get_preferred_channel(stored: str | None) -> str | None:
    """Return the channel with the highest weighted count, or None."""
    best: str | None = None
    best_score = 0
    for channel, count in parse_channel_preference(stored).items():
        score = count * CHANNEL_WEIGHTS.get(channel, 1)
        # Strict comparison: on a tie the channel seen first keeps the lead.
        if score > best_score:
            best_score = score
            best = channel
    return best


def decide_new_channel_preference(stored: str | None, channel_used: str) -> str:
    """Record one more send on ``channel_used`` and return the new stored value."""
    counts = parse_channel_preference(stored)
    counts[channel_used] = counts.get(channel_used, 0) + 1
    return serialize_channel_preference(counts)


record_send = decide_new_channel_preference
