"""Shared data structures used across the crawler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TypedDict


class FieldMeta(TypedDict):
    """Describes a form control read from the live DOM."""

    selector: str
    type: str
    name: str
    placeholder: str
    label: str
    required: bool


class _FormFieldBase(TypedDict):
    selector: str
    value: str


class FormField(_FormFieldBase, total=False):
    """A resolved fill instruction, either caller supplied or generated."""

    type: str


class TerminationReason(str, Enum):
    FRONTIER_EXHAUSTED = "frontier_exhausted"
    MAX_PAGES_REACHED = "max_pages_reached"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class FrontierItem:
    """A queued ``(url, depth)`` pair waiting to be expanded."""

    url: str
    depth: int


@dataclass(slots=True)
class DiscoveredPage:
    """A page committed to the crawl output."""

    url: str
    depth: int
    has_form: bool = False
    form_submitted: bool = False
    form_interaction: bool = False
    post_submit_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "depth": self.depth,
            "has_form": self.has_form,
            "form_submitted": self.form_submitted,
            "form_interaction": self.form_interaction,
            "post_submit_url": self.post_submit_url,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "DiscoveredPage":
        return cls(
            url=raw["url"],
            depth=int(raw.get("depth", 0)),
            has_form=bool(raw.get("has_form", False)),
            form_submitted=bool(raw.get("form_submitted", False)),
            form_interaction=bool(raw.get("form_interaction", False)),
            post_submit_url=raw.get("post_submit_url"),
        )
