from __future__ import annotations

from leadradar.contacts.channel_preference import (
    decide_new_channel_preference,
    get_preferred_channel,
    parse_channel_preference,
    serialize_channel_preference,
)


def test_new_channel_is_appended_with_one_use():
    assert decide_new_channel_preference("email:1", "telegram") == "email:1,telegram:1"


def test_existing_channel_count_is_incremented():
    assert decide_new_channel_preference("email:1", "email") == "email:2"


def test_empty_preference_starts_counting():
    assert decide_new_channel_preference(None, "linkedin") == "linkedin:1"
    assert decide_new_channel_preference("", "email") == "email:1"


def test_serialized_counts_are_ordered_highest_first():
    assert decide_new_channel_preference("email:1,telegram:2", "telegram") == "telegram:3,email:1"


def test_legacy_bare_channel_reads_as_single_use():
    assert parse_channel_preference("email") == {"email": 1}
    assert decide_new_channel_preference("email", "email") == "email:2"


def test_parse_skips_malformed_and_non_positive_parts():
    assert parse_channel_preference("email:2,bad,twitter:x,telegram:0, linkedin :3") == {
        "email": 2,
        "linkedin": 3,
    }


def test_round_trip_keeps_counts():
    counts = {"telegram": 3, "email": 1, "linkedin": 2}
    assert parse_channel_preference(serialize_channel_preference(counts)) == counts


def test_preferred_channel_is_highest_count():
    assert get_preferred_channel("email:1,telegram:3,twitter:2") == "telegram"
    assert get_preferred_channel(None) is None
    assert get_preferred_channel("") is None


def test_preferred_channel_tie_goes_to_first_stored():
    assert get_preferred_channel("twitter:2,email:2") == "twitter"
    assert get_preferred_channel("email:2,twitter:2") == "email"


def test_serialize_tie_keeps_mapping_order():
    assert serialize_channel_preference({"twitter": 1, "email": 1}) == "twitter:1,email:1"
