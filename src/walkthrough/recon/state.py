from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Optional

from ..core.models import DiscoveredPage, FrontierItem, TerminationReason


@dataclass(slots=True)
class CrawlSession:
    """Frontier and visited bookkeeping for one crawl, owned by the crawler."""

    frontier: deque[FrontierItem] = field(default_factory=deque)
    visited: set[str] = field(default_factory=set)
    queued: set[str] = field(default_factory=set)
    discovered: list[DiscoveredPage] = field(default_factory=list)
    stats: Counter[str] = field(default_factory=Counter)
    termination: Optional[TerminationReason] = None

    def enqueue(self, url: str, depth: int) -> bool:
        if url in self.visited or url in self.queued:
            return False
        self.queued.add(url)
        self.frontier.append(FrontierItem(url=url, depth=depth))
        return True

    def dequeue(self) -> FrontierItem:
        item = self.frontier.popleft()
        self.queued.discard(item.url)
        return item

    def is_visited(self, url: str) -> bool:
        return url in self.visited

    def mark_visited(self, url: str) -> None:
        self.visited.add(url)

    def commit(self, item: FrontierItem) -> DiscoveredPage:
        self.visited.add(item.url)
        page = DiscoveredPage(url=item.url, depth=item.depth)
        self.discovered.append(page)
        return page
