"""URL resolution and canonicalisation helpers."""

from __future__ import annotations

from typing import Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

ALLOWED_SCHEMES = frozenset({"http", "https"})
DEFAULT_PORTS = {"http": 80, "https": 443}


def resolve_url(candidate: Optional[str], base_url: str) -> Optional[str]:
    """Resolves ``candidate`` against ``base_url``.

    Returns ``None`` for blank, malformed or non-HTTP candidates so callers
    can drop them without further checks.
    """

    if not candidate:
        return None
    value = candidate.strip()
    if not value:
        return None

    try:
        joined = urljoin(base_url, value)
        parsed = urlsplit(joined)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return None

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.hostname:
        return None
    return joined


def _canonical_netloc(parsed: SplitResult, scheme: str) -> str:
    hostname = parsed.hostname or ""
    if ":" in hostname:
        hostname = f"[{hostname}]"

    userinfo = ""
    if "@" in parsed.netloc:
        userinfo = parsed.netloc.rsplit("@", 1)[0] + "@"

    port = parsed.port
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        return f"{userinfo}{hostname}:{port}"
    return f"{userinfo}{hostname}"


def normalize_url(url: str, base_url: Optional[str] = None) -> str:
    """Returns a stable comparison key for ``url``.

    The fragment is dropped, scheme and host are lower-cased, default ports
    removed and trailing slashes stripped from any non-root path. Input that
    cannot be parsed as an absolute URL is returned unchanged.
    """

    try:
        target = urljoin(base_url, url) if base_url else url
        parsed = urlsplit(target.strip())
        scheme = parsed.scheme.lower()
        if not scheme or not parsed.netloc:
            return url
        netloc = _canonical_netloc(parsed, scheme)
    except ValueError:
        return url

    path = parsed.path or "/"
    if path != "/":
        path = path.rstrip("/") or "/"

    return urlunsplit((scheme, netloc, path, parsed.query, ""))
