"""Tests for pulling JSON objects out of provider responses."""

import pytest

from conftest import completion
from cookdobby.services.response_extractor import (
    extract_payload,
    find_trailing_json_object,
    get_completion_text,
    parse_model_json,
)
from cookdobby.utils.exceptions import InvalidModelJSON, MalformedProviderResponse


def test_get_completion_text():
    assert get_completion_text(completion('{"mode":"recipe"}')) == '{"mode":"recipe"}'


@pytest.mark.parametrize(
    "envelope",
    [
        {},
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        ["not", "an", "object"],
    ],
)
def test_missing_completion_is_malformed(envelope):
    with pytest.raises(MalformedProviderResponse) as exc_info:
        get_completion_text(envelope)
    assert exc_info.value.raw is not None


def test_plain_json_object():
    assert parse_model_json('  {"mode": "landing", "intro": "hi", "sections": []}\n') == {
        "mode": "landing",
        "intro": "hi",
        "sections": [],
    }


def test_commentary_before_trailing_object():
    text = 'Sure! Here is your recipe:\n{"mode":"recipe","title":"Soup","ingredients":[],"steps":[]}'
    assert parse_model_json(text)["title"] == "Soup"


def test_fenced_object_after_commentary():
    text = 'Sure! ```json\n{"mode":"recipe","title":"Roll","ingredients":[],"steps":[]}\n```'
    assert parse_model_json(text) == {"mode": "recipe", "title": "Roll", "ingredients": [], "steps": []}


def test_braces_inside_string_values():
    text = 'Note {this}: {"mode":"recipe","title":"Curly {brace} pie","steps":["Mix } well"],"ingredients":[]}'
    parsed = parse_model_json(text)
    assert parsed["title"] == "Curly {brace} pie"
    assert parsed["steps"] == ["Mix } well"]


def test_returns_outermost_trailing_object():
    text = 'ok {"mode":"landing","intro":"x","sections":[{"title":"a","url":"/r/a"}]}'
    parsed = parse_model_json(text)
    assert parsed["mode"] == "landing"
    assert parsed["sections"][0]["title"] == "a"


def test_text_after_object_is_not_tolerated():
    with pytest.raises(InvalidModelJSON) as exc_info:
        parse_model_json('{"mode":"recipe"} Enjoy your meal!')
    assert exc_info.value.raw == '{"mode":"recipe"} Enjoy your meal!'


@pytest.mark.parametrize("text", ["", "no json here", "{broken", '{"a": 1', "[1, 2, 3]"])
def test_invalid_text_raises_with_raw(text):
    with pytest.raises(InvalidModelJSON) as exc_info:
        parse_model_json(text)
    assert exc_info.value.raw == text


def test_find_trailing_json_object_requires_object_at_end():
    with pytest.raises(ValueError):
        find_trailing_json_object('{"a": 1} trailing')


def test_extract_payload_from_envelope():
    envelope = completion('Here you go {"mode":"landing","intro":"hi","sections":[]}')
    assert extract_payload(envelope)["intro"] == "hi"


@pytest.mark.parametrize("prefix", ["", "Sure! "])
def test_nesting_too_deep_to_decode_is_invalid_json(prefix):
    depth = 1_000_000
    text = prefix + '{"a":' * depth + "1" + "}" * depth
    with pytest.raises(InvalidModelJSON) as exc_info:
        parse_model_json(text)
    assert exc_info.value.raw == text
