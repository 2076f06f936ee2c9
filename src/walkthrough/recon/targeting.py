from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit

from ..core.config import CrawlConfig


def hostname_of(url: str) -> Optional[str]:
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


@dataclass(slots=True)
class TargetFilter:
    """Decides whether a candidate URL is eligible for traversal."""

    start_hostname: str
    same_domain_only: bool = True
    exclude_patterns: tuple[str, ...] = field(default_factory=tuple)
    include_patterns: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_config(cls, config: CrawlConfig) -> "TargetFilter":
        return cls(
            start_hostname=hostname_of(config.start_url) or "",
            same_domain_only=config.same_domain_only,
            exclude_patterns=tuple(config.exclude_patterns),
            include_patterns=tuple(config.include_patterns),
        )

    def admit(self, url: str) -> bool:
        if self.same_domain_only and not self.is_same_domain(url):
            return False

        if any(pattern in url for pattern in self.exclude_patterns):
            return False

        if self.include_patterns and not any(
            pattern in url for pattern in self.include_patterns
        ):
            return False

        return True

    def is_same_domain(self, url: str) -> bool:
        hostname = hostname_of(url)
        if hostname is None:
            return False
        return hostname == self.start_hostname


def admit(url: str, start_url: str, config: CrawlConfig) -> bool:
    """Stateless form of :meth:`TargetFilter.admit` against ``start_url``."""

    target_filter = TargetFilter(
        start_hostname=hostname_of(start_url) or "",
        same_domain_only=config.same_domain_only,
        exclude_patterns=tuple(config.exclude_patterns),
        include_patterns=tuple(config.include_patterns),
    )
    return target_filter.admit(url)
