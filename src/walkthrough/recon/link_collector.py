"""Multi-strategy link discovery on a rendered page."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, NamedTuple, Sequence, Tuple

from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError

from .urls import normalize_url, resolve_url

logger = logging.getLogger(__name__)

ANCHOR_SCRIPT = """
() => Array.from(document.querySelectorAll("a[href], area[href]"))
    .map((el) => el.href)
    .filter((href) => typeof href === "string" && href.trim())
"""

SPA_ATTRIBUTES = ("to", "routerlink", "data-href", "data-link", "data-url", "data-to", "data-route")

SPA_ATTRIBUTE_SCRIPT = """
(attributes) => {
    const selector = attributes.map((name) => `[${name}]`).join(", ");
    const values = [];
    for (const el of document.querySelectorAll(selector)) {
        for (const name of attributes) {
            const value = el.getAttribute(name);
            if (value && value.trim()) {
                values.push(value);
                break;
            }
        }
    }
    return values;
}
"""

ONCLICK_SCRIPT = """
() => Array.from(document.querySelectorAll("[onclick]"))
    .map((el) => el.getAttribute("onclick") || "")
"""

NAVIGATION_SCRIPT = """
() => Array.from(document.querySelectorAll(
    "nav a, menu a, [role='navigation'] a, [role='menuitem']"
)).map((el) => el.getAttribute("href") || el.getAttribute("data-href") || "")
"""

ROUTER_CONFIG_SCRIPT = """
() => {
    const sources = [];
    const reactRouter = window.__REACT_ROUTER__ || window.ReactRouter;
    if (reactRouter && Array.isArray(reactRouter.routes)) sources.push(reactRouter.routes);
    const vueRouter = window.__VUE_ROUTER__;
    if (vueRouter && vueRouter.options && Array.isArray(vueRouter.options.routes)) {
        sources.push(vueRouter.options.routes);
    }
    const paths = [];
    const walk = (routes, prefix) => {
        for (const route of routes) {
            if (!route || typeof route.path !== "string") continue;
            const path = route.path.startsWith("/")
                ? route.path
                : `${prefix.replace(/\\/$/, "")}/${route.path}`;
            paths.push(path);
            if (Array.isArray(route.children)) walk(route.children, path);
        }
    };
    for (const routes of sources) walk(routes, "");
    return paths;
}
"""

ONCLICK_PATH_PATTERN = re.compile(r"""['"`](/[^'"`\s]*)['"`]""")
DYNAMIC_SEGMENT_PATTERN = re.compile(r"[:*]")
MARKUP_LINK_RELS = {"next", "prev", "alternate"}
REFRESH_URL_PATTERN = re.compile(r"url\s*=\s*['\"]?([^'\";]+)", re.IGNORECASE)

Strategy = Callable[[Any], List[str]]


class ExtractionResult(NamedTuple):
    links: List[str]
    ok: bool


def anchor_links(page: Any) -> List[str]:
    return list(page.evaluate(ANCHOR_SCRIPT) or [])


def spa_attribute_links(page: Any) -> List[str]:
    return list(page.evaluate(SPA_ATTRIBUTE_SCRIPT, list(SPA_ATTRIBUTES)) or [])


def onclick_links(page: Any) -> List[str]:
    """Root-relative path literals inside inline ``onclick`` handlers."""

    paths: List[str] = []
    for handler in page.evaluate(ONCLICK_SCRIPT) or []:
        paths.extend(ONCLICK_PATH_PATTERN.findall(handler))
    return paths


def navigation_links(page: Any) -> List[str]:
    return [
        href
        for href in page.evaluate(NAVIGATION_SCRIPT) or []
        if href and not href.startswith("#")
    ]


def router_config_links(page: Any) -> List[str]:
    return [
        path
        for path in page.evaluate(ROUTER_CONFIG_SCRIPT) or []
        if path and not DYNAMIC_SEGMENT_PATTERN.search(path)
    ]


def markup_links(page: Any) -> List[str]:
    """Refresh redirects and ``<link rel>`` hints from the serialized HTML."""

    soup = BeautifulSoup(page.content(), "html.parser")
    links: List[str] = []

    for meta in soup.find_all("meta"):
        if (meta.get("http-equiv") or "").lower() != "refresh":
            continue
        match = REFRESH_URL_PATTERN.search(meta.get("content") or "")
        if match:
            links.append(match.group(1).strip())

    for link in soup.find_all("link", href=True):
        rels = {value.lower() for value in link.get("rel") or []}
        if rels & MARKUP_LINK_RELS:
            links.append(link["href"])

    return links


DEFAULT_STRATEGIES: Tuple[Strategy, ...] = (
    anchor_links,
    spa_attribute_links,
    onclick_links,
    navigation_links,
    router_config_links,
    markup_links,
)


@dataclass(slots=True)
class LinkCollector:
    """Runs every extraction strategy and merges the results."""

    strategies: Sequence[Strategy] = field(default_factory=lambda: DEFAULT_STRATEGIES)

    def collect(self, page: Any) -> ExtractionResult:
        try:
            base_url = page.url
        except PlaywrightError:
            logger.debug("Page URL unavailable; no links extracted", exc_info=True)
            return ExtractionResult(links=[], ok=False)

        raw_links: List[str] = []
        ok = True
        for strategy in self.strategies:
            try:
                raw_links.extend(strategy(page))
            except PlaywrightError:
                ok = False
                logger.debug(
                    "Link strategy %s failed on %s",
                    getattr(strategy, "__name__", repr(strategy)),
                    base_url,
                    exc_info=True,
                )

        return ExtractionResult(links=self.normalize_all(base_url, raw_links), ok=ok)

    @staticmethod
    def normalize_all(base_url: str, candidates: Sequence[str]) -> List[str]:
        """Resolves against ``base_url``, normalizes and dedups in order."""

        ordered: dict[str, None] = {}
        for candidate in candidates:
            resolved = resolve_url(candidate, base_url)
            if resolved is None:
                continue
            ordered.setdefault(normalize_url(resolved), None)
        return list(ordered)
