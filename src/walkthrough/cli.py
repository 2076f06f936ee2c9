"""Command line interface for the walkthrough crawler."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .core.config import load_configuration, load_form_fields, load_seed_routes
from .recon.crawler import BrowserSessionError, Crawler


def _split(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [piece.strip() for piece in value.split(",") if piece.strip()]


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Discover the pages of a web application")
    parser.add_argument("url", help="Start URL of the crawl")
    parser.add_argument("--max-depth", type=int, help="Maximum link distance from the start page (default 3)")
    parser.add_argument("--max-pages", type=int, help="Maximum number of pages to record (default 50)")
    parser.add_argument("--exclude", help="Comma separated substrings; matching URLs are skipped")
    parser.add_argument("--include", help="Comma separated substrings; only matching URLs are kept")
    parser.add_argument("--no-forms", action="store_true", help="Do not fill or submit forms")
    parser.add_argument("--form-fields", type=Path, help="JSON file with [{selector, value}] overrides")
    parser.add_argument("--routes", type=Path, help="File with extra routes to seed the crawl")
    parser.add_argument("--report", default="crawl_report.json", help="Output report file (JSON)")
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run Chromium headless (default comes from .env/HEADLESS)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def run_cli(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_configuration(
        args.url,
        args.report,
        max_depth=args.max_depth,
        max_pages=args.max_pages,
        exclude_patterns=_split(args.exclude),
        include_patterns=_split(args.include),
        auto_fill_forms=False if args.no_forms else None,
        custom_form_fields=load_form_fields(args.form_fields) if args.form_fields else None,
        seed_routes=load_seed_routes(args.routes) if args.routes else None,
        headless=args.headless,
    )

    print(f"[*] Crawling {config.start_url}")
    crawler = Crawler(config)
    try:
        report = crawler.run()
    except BrowserSessionError as exc:
        print(f"[!] {exc}")
        return 1
    except KeyboardInterrupt:
        print("[!] Interrupted by user")
        return 130

    report.save(config.report_path)
    print(f"[+] Report saved to {config.report_path}")
    print(f"    Pages discovered : {len(report.pages)}")
    print(f"    Form pairs       : {len(report.as_capture_targets().form_pairs)}")
    print(f"    URLs visited     : {len(report.visited)}")
    print(f"    Stopped because  : {report.termination.value}")
    return 0


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
