"""Configuration loading utilities."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from .models import FormField

DEFAULT_MAX_DEPTH = 3
DEFAULT_MAX_PAGES = 50
DEFAULT_EXCLUDE_PATTERNS = (
    "#",
    "mailto:",
    "tel:",
    "javascript:",
    ".pdf",
    ".jpg",
    ".png",
    ".zip",
)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class CrawlConfig:
    """Holds runtime options for a single crawl session."""

    start_url: str
    report_path: Path = field(default_factory=lambda: Path("crawl_report.json"))
    max_depth: int = DEFAULT_MAX_DEPTH
    max_pages: int = DEFAULT_MAX_PAGES
    same_domain_only: bool = True
    exclude_patterns: List[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS)
    )
    include_patterns: List[str] = field(default_factory=list)
    auto_fill_forms: bool = True
    custom_form_fields: Optional[List[FormField]] = None
    seed_routes: Optional[List[str]] = None
    headless: bool = True
    settle_ms: int = 1000
    post_submit_settle_ms: int = 2000

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {self.max_pages}")


def _split_patterns(raw: Optional[str]) -> Optional[List[str]]:
    if raw is None:
        return None
    return [piece.strip() for piece in raw.split(",") if piece.strip()]


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def load_configuration(
    start_url: str,
    report_name: str = "crawl_report.json",
    *,
    max_depth: Optional[int] = None,
    max_pages: Optional[int] = None,
    exclude_patterns: Optional[Sequence[str]] = None,
    include_patterns: Optional[Sequence[str]] = None,
    auto_fill_forms: Optional[bool] = None,
    custom_form_fields: Optional[List[FormField]] = None,
    seed_routes: Optional[List[str]] = None,
    headless: Optional[bool] = None,
) -> CrawlConfig:
    """Builds a ``CrawlConfig`` from CLI input and environment variables.

    Explicit keyword arguments take precedence over the environment. The
    crawl is always restricted to the start URL's host.
    """

    load_dotenv()  # Loads .env values if present

    if exclude_patterns is None:
        exclude_patterns = _split_patterns(os.getenv("EXCLUDE_PATTERNS"))
    if include_patterns is None:
        include_patterns = _split_patterns(os.getenv("INCLUDE_PATTERNS"))

    return CrawlConfig(
        start_url=start_url.strip(),
        report_path=Path(report_name).resolve(),
        max_depth=max_depth if max_depth is not None else _env_int("MAX_DEPTH", DEFAULT_MAX_DEPTH),
        max_pages=max_pages if max_pages is not None else _env_int("MAX_PAGES", DEFAULT_MAX_PAGES),
        same_domain_only=True,
        exclude_patterns=(
            list(exclude_patterns)
            if exclude_patterns is not None
            else list(DEFAULT_EXCLUDE_PATTERNS)
        ),
        include_patterns=list(include_patterns or []),
        auto_fill_forms=(
            auto_fill_forms
            if auto_fill_forms is not None
            else _env_flag("AUTO_FILL_FORMS", True)
        ),
        custom_form_fields=custom_form_fields,
        seed_routes=seed_routes,
        headless=headless if headless is not None else _env_flag("HEADLESS", True),
    )


def load_form_fields(path: Path) -> List[FormField]:
    """Reads caller supplied form values from a JSON list of objects."""

    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON list of {{selector, value}} objects")

    fields: List[FormField] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: every entry must be an object, got {entry!r}")
        selector = entry.get("selector")
        value = entry.get("value")
        if not selector or value is None:
            raise ValueError(f"{path}: every entry needs 'selector' and 'value'")
        item: FormField = {"selector": selector, "value": str(value)}
        if entry.get("type"):
            item["type"] = entry["type"]
        fields.append(item)
    return fields


def load_seed_routes(path: Path) -> List[str]:
    """Reads routes produced by static analysis (JSON list or one per line)."""

    text = Path(path).read_text(encoding="utf-8")
    stripped = text.lstrip()
    if stripped.startswith("["):
        return [str(route).strip() for route in json.loads(stripped) if str(route).strip()]
    return [line.strip() for line in text.splitlines() if line.strip() and not line.startswith("#")]
