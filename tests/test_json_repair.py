import pytest

from scriptforge.util.json_repair import JsonRepairError, parse_relaxed_json


def test_parse_relaxed_json_handles_bare_keys_single_quotes_and_trailing_commas():
    parsed = parse_relaxed_json("{a: 1, b: 'two', c: [1, 2,],}")
    assert parsed == {"a": 1, "b": "two", "c": [1, 2]}


def test_parse_relaxed_json_strips_code_fence():
    parsed = parse_relaxed_json('```json\n{"namespace": "add", "arguments": "{}",}\n```')
    assert parsed == {"namespace": "add", "arguments": "{}"}


def test_parse_relaxed_json_leaves_colons_inside_strings_alone():
    parsed = parse_relaxed_json('{url: "http://example.com/a", ok: true}')
    assert parsed == {"url": "http://example.com/a", "ok": True}


def test_parse_relaxed_json_accepts_strict_json_unchanged():
    assert parse_relaxed_json('{"text": "a, }"}') == {"text": "a, }"}


def test_parse_relaxed_json_rejects_garbage():
    with pytest.raises(JsonRepairError):
        parse_relaxed_json("{bad json")
    with pytest.raises(JsonRepairError):
        parse_relaxed_json("   ")
