"""Unit tests for the strict JSON model."""

import pytest

from jws_jcs.core.errors import ParseError, PropertyNotFoundError
from jws_jcs.core.json_model import parse, remove_property, serialize_pretty


def test_parse_preserves_property_order() -> None:
    """Objects keep document order, not sorted order."""
    value = parse('{"b": 1, "a": {"z": true, "y": null}, "c": [3, 1, 2]}')
    assert list(value) == ["b", "a", "c"]
    assert list(value["a"]) == ["z", "y"]
    assert value["c"] == [3, 1, 2]


def test_parse_accepts_utf8_bytes() -> None:
    value = parse('{"name": "Smørrebrød"}'.encode("utf-8"))
    assert value["name"].startswith("Sm")


@pytest.mark.parametrize(
    "text",
    [
        '{"a": 1, "a": 2}',
        '{"outer": {"k": 1, "k": 1}}',
        '[{"x": 1}, {"x": 2, "x": 3}]',
    ],
)
def test_duplicate_keys_rejected(text: str) -> None:
    with pytest.raises(ParseError, match="Duplicate"):
        parse(text)


@pytest.mark.parametrize(
    "text",
    [
        '{"a": 1} trailing',
        '{"a": 1}{"b": 2}',
        '{"a": 1',
        '["unterminated',
        '"bad \\x escape"',
        '{"a": NaN}',
        '[Infinity]',
        '[-Infinity]',
        '[1e400]',
        '[-1e400]',
        '[1e-400]',
        '[01]',
        '',
        '{"a": "raw\ncontrol"}',
    ],
)
def test_malformed_input_rejected(text: str) -> None:
    with pytest.raises(ParseError):
        parse(text)


def test_lone_surrogate_rejected() -> None:
    with pytest.raises(ParseError, match="surrogate"):
        parse('["\\ud800"]')


def test_surrogate_pair_accepted() -> None:
    assert parse('["\\ud83d\\ude00"]') == [chr(0x1F600)]


def test_invalid_utf8_rejected() -> None:
    with pytest.raises(ParseError, match="UTF-8"):
        parse(b'{"a": "\xff"}')


def test_zero_literals_are_not_underflow() -> None:
    assert parse("[0.0, -0, 0e10, 0.000e-999]") == [0.0, 0, 0.0, 0.0]


def test_nesting_limit() -> None:
    assert parse("[[]]", max_depth=2) == [[]]
    with pytest.raises(ParseError, match="Nesting"):
        parse("[" * 10 + "]" * 10, max_depth=5)


def test_remove_property_copies() -> None:
    """Removal leaves the input untouched and keeps the remaining order."""
    original = parse('{"c": 1, "signature": "x", "a": 2, "b": 3}')
    stripped = remove_property(original, "signature")

    assert list(stripped) == ["c", "a", "b"]
    assert "signature" in original
    assert stripped is not original


def test_remove_missing_property() -> None:
    with pytest.raises(PropertyNotFoundError):
        remove_property({"a": 1}, "signature")
    with pytest.raises(PropertyNotFoundError):
        remove_property([1, 2], "signature")


def test_serialize_pretty_keeps_document_order() -> None:
    text = serialize_pretty(parse('{"z": 1, "a": [true]}'))
    assert text.index('"z"') < text.index('"a"')
    assert "\n" in text
