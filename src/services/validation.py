"""Declarative validation of multipart form fields.

Rules are checked in declaration order and the first failing rule wins; the
caller gets a ``ValidationResult`` instead of an exception so decoding never
raises across the route boundary. Nested JSON fields are parsed and then
checked against a pydantic shape.
"""

import dataclasses
import json
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import Field, StrictStr, StringConstraints, TypeAdapter

from src.errors import BadRequestError, ValidationError
from src.models.mixins import ID_PATTERN, is_valid_id
from src.schemas.page import ContentBlock, FooterConfig, Theme
from src.schemas.template import TemplateLink

# Protocol and top-level domain are both optional: "a.com", "localhost:3000/x"
# and "https://example.org/path?q=1" all pass.
URL_PATTERN = re.compile(
    r"^(?:(?:https?|ftp)://)?"
    r"(?:[^\s:@/]+(?::[^\s@/]*)?@)?"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*\.?"
    r"(?::\d{1,5})?"
    r"(?:[/?#]\S*)?$"
)
URL_MAX_LENGTH = 2048

THEME = TypeAdapter(Theme)
FOOTER_CONFIG = TypeAdapter(FooterConfig)
TEMPLATE_LINKS = TypeAdapter(Annotated[list[TemplateLink], Field(min_length=1)])
PAGE_CONTENTS = TypeAdapter(Annotated[list[ContentBlock], Field(min_length=1)])
PAGE_IDS = TypeAdapter(
    Annotated[
        list[Annotated[StrictStr, StringConstraints(pattern=ID_PATTERN.pattern)]],
        Field(min_length=1),
    ]
)


@dataclass(frozen=True)
class FormField:
    """A named field, the message reported when it fails, and its decoder.

    ``decode`` receives the raw string and returns the cleaned value or
    raises ``ValueError``.
    """

    name: str
    message: str
    decode: Callable[[str], Any]
    optional: bool = False


@dataclass(frozen=True)
class ValidationResult:
    cleaned: dict[str, Any] = dataclasses.field(default_factory=dict)
    field: str | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.field is None


def validate_form(data: Mapping[str, Any], rules: Sequence[FormField]) -> ValidationResult:
    """Validate ``data`` against ``rules``, stopping at the first invalid field."""
    cleaned: dict[str, Any] = {}
    for rule in rules:
        raw = data.get(rule.name)
        if raw is None:
            if rule.optional:
                continue
            return ValidationResult(field=rule.name, message=rule.message)
        if not isinstance(raw, str):
            return ValidationResult(field=rule.name, message=rule.message)
        try:
            cleaned[rule.name] = rule.decode(raw)
        except ValueError:
            # json.JSONDecodeError and pydantic's ValidationError both land here
            return ValidationResult(field=rule.name, message=rule.message)
    return ValidationResult(cleaned=cleaned)


def require_valid(result: ValidationResult) -> dict[str, Any]:
    """Return the cleaned payload or raise the first failure as a ValidationError."""
    if not result.ok:
        raise ValidationError(result.message or f"{result.field} value is invalid")
    return result.cleaned


def ensure_known_fields(names: Iterable[str], allowed: Iterable[str]) -> None:
    """Reject a partial update carrying any field outside ``allowed``."""
    unknown = sorted(set(names) - set(allowed))
    if unknown:
        raise BadRequestError(
            "Unknown field detected, please only enter valid field(s): " + ", ".join(unknown)
        )


# --- Decoders ---


def text(min_length: int = 1, max_length: int | None = None) -> Callable[[str], str]:
    """Non-empty string with optional length bounds."""

    def decode(raw: str) -> str:
        if len(raw) < min_length:
            raise ValueError("too short")
        if max_length is not None and len(raw) > max_length:
            raise ValueError("too long")
        return raw

    return decode


def boolean(raw: str) -> bool:
    """Accept "true" or "false" in any case."""
    value = raw.lower()
    if value not in ("true", "false"):
        raise ValueError("not a boolean")
    return value == "true"


def object_id(raw: str) -> str:
    if not is_valid_id(raw):
        raise ValueError("not an id")
    return raw


def url(raw: str) -> str:
    if not raw or len(raw) > URL_MAX_LENGTH or URL_PATTERN.fullmatch(raw) is None:
        raise ValueError("not a url")
    return raw


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def json_of(adapter: TypeAdapter) -> Callable[[str], Any]:
    """Parse a JSON string and check it against ``adapter``'s shape.

    ``NaN`` and ``Infinity`` are rejected, as is nesting too deep for the
    parser. The cleaned value is plain JSON-compatible data ready to be stored.
    """

    def decode(raw: str) -> Any:
        try:
            parsed = json.loads(raw, parse_constant=_reject_constant)
        except RecursionError as e:
            raise ValueError("nested too deeply") from e
        value = adapter.validate_python(parsed)
        return adapter.dump_python(value, mode="json")

    return decode
