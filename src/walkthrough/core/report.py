"""Crawl output and the artifact handed to the screenshot stage."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from .models import DiscoveredPage, TerminationReason


@dataclass
class CrawlReport:
    """Structured data produced by one crawl session."""

    start_url: str = ""
    pages: List[DiscoveredPage] = field(default_factory=list)
    termination: TerminationReason = TerminationReason.FRONTIER_EXHAUSTED
    visited: List[str] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def urls(self) -> List[str]:
        return [page.url for page in self.pages]

    def to_json(self) -> str:
        data = {
            "start_url": self.start_url,
            "termination": self.termination.value,
            "pages": [page.to_dict() for page in self.pages],
            "visited": sorted(self.visited),
            "stats": dict(sorted(self.stats.items())),
        }
        return json.dumps(data, indent=4)

    def save(self, path: Path) -> None:
        path.write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "CrawlReport":
        raw = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            start_url=raw.get("start_url", ""),
            pages=[DiscoveredPage.from_dict(item) for item in raw.get("pages", [])],
            termination=TerminationReason(
                raw.get("termination", TerminationReason.FRONTIER_EXHAUSTED.value)
            ),
            visited=sorted(raw.get("visited", [])),
            stats={key: int(value) for key, value in raw.get("stats", {}).items()},
        )

    def as_capture_targets(self) -> "CaptureTargetsArtifact":
        return CaptureTargetsArtifact(
            start_url=self.start_url,
            pages=tuple(
                DiscoveredPage.from_dict(page.to_dict()) for page in self.pages
            ),
        )


@dataclass(frozen=True)
class CaptureTargetsArtifact:
    """Ordered pages for the screenshot collaborator."""

    start_url: str
    pages: Tuple[DiscoveredPage, ...]

    @property
    def urls(self) -> Tuple[str, ...]:
        return tuple(page.url for page in self.pages)

    @property
    def form_pairs(self) -> Tuple[DiscoveredPage, ...]:
        return tuple(page for page in self.pages if page.form_interaction)
