"""Breadth-first crawler that discovers pages of a rendered web application."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..core.config import CrawlConfig
from ..core.models import DiscoveredPage, FrontierItem, TerminationReason
from ..core.report import CrawlReport
from .forms import FormHandler, has_form
from .link_collector import LinkCollector
from .state import CrawlSession
from .targeting import TargetFilter
from .urls import normalize_url, resolve_url

logger = logging.getLogger(__name__)

# Strictest load condition first, each attempt with a smaller budget.
NAVIGATION_CHAIN = (
    ("networkidle", 30000),
    ("load", 20000),
    ("domcontentloaded", 10000),
)
NETWORK_IDLE_TIMEOUT_MS = 5000
LINK_READY_SELECTOR = "a[href], [to], nav, [role='navigation']"
LINK_READY_TIMEOUT_MS = 5000
VIEWPORT = {"width": 1920, "height": 1080}


class BrowserSessionError(RuntimeError):
    """Raised when no browser session can be created for the crawl."""


@dataclass(frozen=True, slots=True)
class NavigationResult:
    ok: bool
    wait_until: Optional[str] = None


@dataclass
class Crawler:
    """Drives one browser page through a bounded BFS over the target site."""

    config: CrawlConfig
    link_collector: LinkCollector = field(default_factory=LinkCollector)
    form_handler: Optional[FormHandler] = None
    cancel_event: Optional[threading.Event] = None

    def __post_init__(self) -> None:
        self._target_filter = TargetFilter.from_config(self.config)
        if self.form_handler is None:
            self.form_handler = FormHandler(custom_fields=self.config.custom_form_fields)
        self._session = CrawlSession()

    @property
    def session(self) -> CrawlSession:
        """Return the state of the current (or last) crawl."""

        return self._session

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def run(self) -> CrawlReport:
        with sync_playwright() as playwright:
            try:
                browser = playwright.chromium.launch(headless=self.config.headless)
            except PlaywrightError as exc:
                raise BrowserSessionError(f"Could not launch Chromium: {exc}") from exc

            try:
                context = browser.new_context(viewport=VIEWPORT)
                page = context.new_page()
                return self.crawl(page)
            finally:
                browser.close()

    def crawl(self, page: Any) -> CrawlReport:
        """Runs the traversal on an already open page."""

        session = self._session = CrawlSession()
        start_key = normalize_url(self.config.start_url)
        self._seed(session, start_key)

        logger.info(
            "Starting crawl from %s (max depth %d, max pages %d)",
            start_key,
            self.config.max_depth,
            self.config.max_pages,
        )

        while session.frontier and len(session.discovered) < self.config.max_pages:
            if self.cancel_event is not None and self.cancel_event.is_set():
                logger.info("Crawl cancelled with %d item(s) queued", len(session.frontier))
                session.termination = TerminationReason.CANCELLED
                break

            item = session.dequeue()
            if session.is_visited(item.url):
                session.stats["duplicates"] += 1
                continue
            if item.depth > self.config.max_depth:
                session.stats["too_deep"] += 1
                continue
            if not self._target_filter.admit(item.url):
                logger.debug("Skipping filtered URL %s", item.url)
                session.stats["filtered"] += 1
                continue

            discovered_page = session.commit(item)
            logger.info("[depth %d] Processing %s", item.depth, item.url)

            if len(session.discovered) >= self.config.max_pages:
                logger.info("Reached max pages limit (%d)", self.config.max_pages)
                session.termination = TerminationReason.MAX_PAGES_REACHED
                break

            if item.depth >= self.config.max_depth:
                continue

            try:
                self._expand(page, item, discovered_page, session)
            except PlaywrightError:
                session.stats["page_errors"] += 1
                logger.warning("Error processing %s; continuing", item.url, exc_info=True)

        if session.termination is None:
            session.termination = TerminationReason.FRONTIER_EXHAUSTED

        logger.info(
            "Crawl complete: %d page(s) discovered (%s)",
            len(session.discovered),
            session.termination.value,
        )
        return CrawlReport(
            start_url=start_key,
            pages=list(session.discovered),
            termination=session.termination,
            visited=sorted(session.visited),
            stats=dict(session.stats),
        )

    # ------------------------------------------------------------------
    # Traversal steps
    # ------------------------------------------------------------------
    def _seed(self, session: CrawlSession, start_key: str) -> None:
        session.enqueue(start_key, 0)

        routes = self.config.seed_routes or []
        added = 0
        for route in routes:
            resolved = resolve_url(route, start_key)
            if resolved is None:
                continue
            key = normalize_url(resolved)
            if not self._target_filter.is_same_domain(key):
                continue
            if session.enqueue(key, 0):
                logger.debug("Added seed route %s", key)
                added += 1

        if routes:
            logger.info("Seeded %d of %d route(s) from static analysis", added, len(routes))

    def _expand(
        self,
        page: Any,
        item: FrontierItem,
        discovered_page: DiscoveredPage,
        session: CrawlSession,
    ) -> None:
        if not self.navigate(page, item.url).ok:
            session.stats["navigation_failures"] += 1
            return

        links = self._extract(page, session)
        if self.config.auto_fill_forms and has_form(page):
            links.extend(self._interact_with_form(page, discovered_page, session))

        added = 0
        for link in dict.fromkeys(links):
            if not self._target_filter.admit(link):
                continue
            if session.enqueue(link, item.depth + 1):
                added += 1

        logger.info("Found %d link(s), queued %d new", len(links), added)

    def _extract(self, page: Any, session: CrawlSession) -> List[str]:
        result = self.link_collector.collect(page)
        if not result.ok:
            session.stats["extraction_failures"] += 1
        return list(result.links)

    def _interact_with_form(
        self, page: Any, discovered_page: DiscoveredPage, session: CrawlSession
    ) -> List[str]:
        """Fills and submits the page's form, tracking a URL change.

        Returns links found on the page after the submission.
        """

        discovered_page.has_form = True
        logger.info("Form detected on %s, attempting to fill and submit", page.url)

        before = normalize_url(page.url)
        result = self.form_handler.fill_and_submit(page)
        if not result.submitted:
            return []

        discovered_page.form_submitted = True
        page.wait_for_timeout(self.config.post_submit_settle_ms)
        after = normalize_url(page.url)
        if after != before:
            session.mark_visited(after)
            discovered_page.form_interaction = True
            discovered_page.post_submit_url = after
            logger.info("Form submission moved %s -> %s", before, after)

        return self._extract(page, session)

    # ------------------------------------------------------------------
    # Browser primitives
    # ------------------------------------------------------------------
    def navigate(self, page: Any, url: str) -> NavigationResult:
        for wait_until, timeout in NAVIGATION_CHAIN:
            try:
                page.goto(url, wait_until=wait_until, timeout=timeout)
            except PlaywrightTimeoutError:
                logger.debug("Timed out loading %s (wait_until=%s)", url, wait_until)
                continue
            except PlaywrightError:
                logger.debug("Navigation to %s failed (wait_until=%s)", url, wait_until, exc_info=True)
                continue

            self._wait_settled(page)
            return NavigationResult(ok=True, wait_until=wait_until)

        logger.warning("Could not navigate to %s, skipping link extraction", url)
        return NavigationResult(ok=False)

    def _wait_settled(self, page: Any) -> None:
        try:
            page.wait_for_load_state("networkidle", timeout=NETWORK_IDLE_TIMEOUT_MS)
        except PlaywrightError:
            page.wait_for_timeout(self.config.settle_ms)

        try:
            page.wait_for_selector(LINK_READY_SELECTOR, timeout=LINK_READY_TIMEOUT_MS)
        except PlaywrightError:
            logger.debug("No link-bearing elements appeared on %s", page.url)

        page.wait_for_timeout(self.config.settle_ms)
