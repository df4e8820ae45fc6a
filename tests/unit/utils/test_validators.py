from __future__ import annotations

from leadradar.utils.validators import (
    optional_text,
    parse_json_string,
    parse_string_list,
    sanitize_text,
    serialize_json,
    split_csv,
)


def test_sanitize_text_strips_nulls_and_truncates():
    assert sanitize_text("  hi\x00 there ") == "hi there"
    assert sanitize_text("abcdef", max_len=3) == "abc"
    assert sanitize_text(None) == ""
    assert optional_text("   ") is None


def test_json_columns_round_trip_and_tolerate_garbage():
    assert parse_json_string(serialize_json(["DeFi", "L2"])) == ["DeFi", "L2"]
    assert serialize_json(None) is None
    assert parse_json_string("{broken", fallback={}) == {}
    assert parse_json_string("", fallback=[]) == []


def test_string_list_drops_blank_items():
    assert parse_string_list('["a", "", null, " b "]') == ["a", " b "]
    assert parse_string_list('{"a": 1}') == []
    assert parse_string_list(None) == []


def test_split_csv():
    assert split_csv(" a, ,b ,c") == ["a", "b", "c"]
    assert split_csv(None) == []
