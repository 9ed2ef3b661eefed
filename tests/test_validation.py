"""Tests for form validation and the update allowlist."""

import json

import pytest

from src.errors import BadRequestError, ValidationError
from src.services.validation import (
    PAGE_CONTENTS,
    PAGE_IDS,
    TEMPLATE_LINKS,
    THEME,
    URL_MAX_LENGTH,
    FormField,
    boolean,
    ensure_known_fields,
    json_of,
    object_id,
    require_valid,
    text,
    url,
    validate_form,
)
from tests.factories import THEME as THEME_PAYLOAD

RULES = [
    FormField("title", "title is missing", text()),
    FormField("visible", "visible must be true or false", boolean),
    FormField("url", "url is invalid", url, optional=True),
]


def test_validate_form_cleans_values():
    result = validate_form({"title": "Hello", "visible": "TRUE"}, RULES)
    assert result.ok
    assert result.cleaned == {"title": "Hello", "visible": True}


def test_validate_form_first_failure_wins():
    result = validate_form({"visible": "maybe", "url": "not a url"}, RULES)
    assert not result.ok
    assert result.field == "title"
    assert result.message == "title is missing"


def test_validate_form_rejects_file_where_text_expected():
    result = validate_form({"title": object(), "visible": "true"}, RULES)
    assert result.field == "title"


def test_optional_field_is_skipped_when_absent():
    result = validate_form({"title": "x", "visible": "false"}, RULES)
    assert "url" not in result.cleaned


def test_require_valid_raises_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        require_valid(validate_form({}, RULES))
    assert exc_info.value.message == "title is missing"
    assert exc_info.value.status_code == 422


@pytest.mark.parametrize(
    "value", ["a.com", "localhost:3000/x", "https://example.org/path?q=1", "ftp://files.example"]
)
def test_url_accepts(value):
    assert url(value) == value


@pytest.mark.parametrize("value", ["", "not a url", "http://", "-bad.com"])
def test_url_rejects(value):
    with pytest.raises(ValueError):
        url(value)


def test_url_length_is_bounded():
    path = "/" + "x" * (URL_MAX_LENGTH - len("a.com/"))
    assert url("a.com" + path) == "a.com" + path
    with pytest.raises(ValueError):
        url("a.com" + path + "x")


def test_boolean_is_case_insensitive():
    assert boolean("TRUE") is True
    assert boolean("False") is False


@pytest.mark.parametrize("value", [" true ", "true\n", "yes", "1", ""])
def test_boolean_rejects(value):
    with pytest.raises(ValueError):
        boolean(value)


def test_text_length_bounds():
    decode = text(max_length=3)
    assert decode("abc") == "abc"
    with pytest.raises(ValueError):
        decode("")
    with pytest.raises(ValueError):
        decode("abcd")


def test_object_id():
    assert object_id("a" * 32) == "a" * 32
    with pytest.raises(ValueError):
        object_id("A" * 32)


def test_json_of_theme():
    decode = json_of(THEME)
    assert decode(json.dumps(THEME_PAYLOAD)) == THEME_PAYLOAD
    missing = {k: v for k, v in THEME_PAYLOAD.items() if k != "bg_color"}
    with pytest.raises(ValueError):
        decode(json.dumps(missing))
    with pytest.raises(ValueError):
        decode("{not json")


def test_json_of_page_ids():
    decode = json_of(PAGE_IDS)
    assert decode(json.dumps(["b" * 32])) == ["b" * 32]
    with pytest.raises(ValueError):
        decode("[]")
    with pytest.raises(ValueError):
        decode(json.dumps({"id": "b" * 32}))


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_json_of_rejects_non_finite_constants(constant):
    decode = json_of(PAGE_CONTENTS)
    with pytest.raises(ValueError):
        decode(f'[{{"type": "text", "content": {constant}}}]')


def test_deeply_nested_json_is_a_field_failure():
    rules = [FormField("links", "links value must be a valid links array", json_of(TEMPLATE_LINKS))]
    result = validate_form({"links": "[" * 100000}, rules)
    assert not result.ok
    assert result.field == "links"
    assert result.message == "links value must be a valid links array"


def test_ensure_known_fields():
    ensure_known_fields(["title", "url"], {"title", "url", "header"})
    with pytest.raises(BadRequestError) as exc_info:
        ensure_known_fields(["title", "owner", "admin"], {"title"})
    assert exc_info.value.message.endswith("admin, owner")
