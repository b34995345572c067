from __future__ import annotations

import pytest

from mcp_audit_parser.core.auparse import extract_key_value_pairs, extract_rule_tags


@pytest.mark.parametrize("body", ['key="mykey"', 'key="key=mykey"', "key=mykey"])
def test_single_key(body: str) -> None:
    store = extract_key_value_pairs(body, {})
    assert extract_rule_tags(store) == ["mykey"]
    assert "key" not in store


def test_hex_encoded_keys_are_split() -> None:
    # "access\x01tamper"
    store = extract_key_value_pairs("key=6163636573730174616D706572", {})
    assert extract_rule_tags(store) == ["access", "tamper"]


def test_single_hex_encoded_key() -> None:
    store = extract_key_value_pairs("key=6E6574", {})
    assert extract_rule_tags(store) == ["net"]


def test_lowercase_hex_is_not_decoded() -> None:
    store = extract_key_value_pairs("key=cafe", {})
    assert extract_rule_tags(store) == ["cafe"]


def test_no_key() -> None:
    store = extract_key_value_pairs("pid=1", {})
    assert extract_rule_tags(store) == []
    assert "pid" in store


def test_null_key_is_not_a_tag() -> None:
    store = extract_key_value_pairs("key=(null)", {})
    assert extract_rule_tags(store) == []
