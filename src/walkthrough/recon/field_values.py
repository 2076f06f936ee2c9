"""Heuristic values for auto-filling form fields."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from ..core.models import FieldMeta, FormField

FIELD_TYPES = frozenset(
    {"text", "email", "password", "number", "select", "checkbox", "radio", "textarea"}
)
TEXT_LIKE_TYPES = {"", "search", "url", "tel"}

STRONG_PASSWORD = "TestPassword123!"
SAMPLE_EMAIL = "test@example.com"
SAMPLE_NAME = "John Doe"
SAMPLE_PHONE = "+1234567890"
SAMPLE_NUMBER = "25"
SAMPLE_COMPANY = "Test Company"
SAMPLE_ADDRESS = "123 Test Street"
SAMPLE_CITY = "Test City"
SAMPLE_COUNTRY = "United States"
SAMPLE_CHECKED = "on"
SAMPLE_TEXT = "Test Value"

_CSS_IDENTIFIER = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")
_WORD_SEPARATORS = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True, slots=True)
class FieldProfile:
    """Lower-cased view of a field used by the rule predicates."""

    type: str
    name: str
    label: str
    placeholder: str
    required: bool

    @classmethod
    def from_meta(cls, meta: FieldMeta) -> "FieldProfile":
        return cls(
            type=(meta.get("type") or "").lower(),
            name=(meta.get("name") or "").lower(),
            label=(meta.get("label") or "").lower(),
            placeholder=(meta.get("placeholder") or "").lower(),
            required=bool(meta.get("required")),
        )

    def mentions(self, keyword: str) -> bool:
        return keyword in self.name or keyword in self.label or keyword in self.placeholder

    def has_word(self, token: str) -> bool:
        """Whole-word match, so "age" does not hit "message" or "page"."""

        return any(
            token in _WORD_SEPARATORS.split(text)
            for text in (self.name, self.label, self.placeholder)
        )


Predicate = Callable[[FieldProfile], bool]


def _type_is(*types: str) -> Predicate:
    return lambda profile: profile.type in types


def _mentions(*keywords: str) -> Predicate:
    return lambda profile: any(profile.mentions(keyword) for keyword in keywords)


def _word(token: str) -> Predicate:
    return lambda profile: profile.has_word(token)


def _any_of(*predicates: Predicate) -> Predicate:
    return lambda profile: any(predicate(profile) for predicate in predicates)


def _required_choice(profile: FieldProfile) -> bool:
    return profile.required and profile.type in {"checkbox", "radio"}


# Evaluated top-down, first match wins.
FIELD_RULES: Tuple[Tuple[Predicate, str], ...] = (
    (_type_is("password"), STRONG_PASSWORD),
    (_any_of(_type_is("email"), _mentions("email")), SAMPLE_EMAIL),
    (_mentions("name"), SAMPLE_NAME),
    (_mentions("phone", "tel"), SAMPLE_PHONE),
    (_any_of(_type_is("number"), _word("age")), SAMPLE_NUMBER),
    (_mentions("company", "organization"), SAMPLE_COMPANY),
    (_mentions("address"), SAMPLE_ADDRESS),
    (_mentions("city"), SAMPLE_CITY),
    (_mentions("country"), SAMPLE_COUNTRY),
    (_required_choice, SAMPLE_CHECKED),
    (_type_is("text", "textarea"), SAMPLE_TEXT),
)


def canonical_field_type(raw_type: Optional[str], tag: Optional[str] = None) -> str:
    """Maps a DOM ``type``/tag pair onto the supported field types."""

    tag_name = (tag or "").lower()
    value = (raw_type or "").lower()

    if tag_name == "textarea" or value == "textarea":
        return "textarea"
    if tag_name == "select" or value.startswith("select"):
        return "select"
    if value in TEXT_LIKE_TYPES:
        return "text"
    return value


def build_selector(
    *,
    element_id: Optional[str],
    name: Optional[str],
    tag: Optional[str],
    position: int,
) -> str:
    """Stable selector preferring id, then name, then nth-of-type."""

    tag_name = (tag or "input").lower()
    if element_id:
        if _CSS_IDENTIFIER.match(element_id):
            return f"#{element_id}"
        return f'[id="{_escape_attribute(element_id)}"]'
    if name:
        return f'{tag_name}[name="{_escape_attribute(name)}"]'
    return f"{tag_name}:nth-of-type({max(position, 1)})"


def _escape_attribute(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def value_for_field(meta: FieldMeta) -> Optional[str]:
    profile = FieldProfile.from_meta(meta)
    for predicate, value in FIELD_RULES:
        if predicate(profile):
            return value
    return None


def generate_fields(metas: Iterable[FieldMeta]) -> List[FormField]:
    """Returns fill instructions for every field with an inferable value."""

    fields: List[FormField] = []
    for meta in metas:
        value = value_for_field(meta)
        if value is None:
            continue
        fields.append({"selector": meta["selector"], "value": value, "type": meta["type"]})
    return fields
