from playwright.sync_api import Error as PlaywrightError

from tests.helpers.fake_browser import FakePage
from walkthrough.recon import link_collector  # type: ignore[import]
from walkthrough.recon.link_collector import LinkCollector, anchor_links  # type: ignore[import]

PAGE_HTML = """
<html><head>
<meta http-equiv="refresh" content="5; url=/moved">
<link rel="next" href="/page/2">
<link rel="stylesheet" href="/styles.css">
</head><body></body></html>
"""


def _spa_page(**overrides) -> FakePage:
    scripts = {
        link_collector.ANCHOR_SCRIPT: [
            "https://a.test/about",
            "https://a.test/about/#team",
            "mailto:hello@a.test",
        ],
        link_collector.SPA_ATTRIBUTE_SCRIPT: ["/dashboard", "settings"],
        link_collector.ONCLICK_SCRIPT: ["window.location.href='/reports'", "track()"],
        link_collector.NAVIGATION_SCRIPT: ["/pricing/", "#top"],
        link_collector.ROUTER_CONFIG_SCRIPT: ["/profile", "/users/:id", "*"],
    }
    scripts.update(overrides)
    return FakePage("https://a.test/app/home", scripts=scripts, html=PAGE_HTML)


def test_collect_merges_all_strategies_in_order():
    result = LinkCollector().collect(_spa_page())

    assert result.ok is True
    assert result.links == [
        "https://a.test/about",
        "https://a.test/dashboard",
        "https://a.test/app/settings",
        "https://a.test/reports",
        "https://a.test/pricing",
        "https://a.test/profile",
        "https://a.test/moved",
        "https://a.test/page/2",
    ]


def test_failed_strategy_does_not_discard_other_results():
    page = _spa_page(**{link_collector.ANCHOR_SCRIPT: PlaywrightError("context destroyed")})

    result = LinkCollector().collect(page)

    assert result.ok is False
    assert "https://a.test/about" not in result.links
    assert "https://a.test/dashboard" in result.links


def test_unextractable_page_yields_no_links():
    page = FakePage(scripts={link_collector.ANCHOR_SCRIPT: PlaywrightError("detached")})

    result = LinkCollector(strategies=(anchor_links,)).collect(page)

    assert result == ([], False)


def test_custom_strategy_results_are_resolved_against_page_url():
    page = FakePage("https://a.test/docs/intro")
    collector = LinkCollector(strategies=(lambda _page: ["../faq/", "next", "/docs/intro#x"],))

    result = collector.collect(page)

    assert result.links == [
        "https://a.test/faq",
        "https://a.test/docs/next",
        "https://a.test/docs/intro",
    ]


def test_onclick_literals_require_root_relative_paths():
    page = FakePage(
        scripts={
            link_collector.ONCLICK_SCRIPT: [
                'navigate("/orders")',
                "open('relative/path')",
                "go(`/billing/`)",
            ]
        }
    )

    assert link_collector.onclick_links(page) == ["/orders", "/billing/"]


def test_onclick_failure_keeps_spa_attribute_links():
    page = _spa_page(**{link_collector.ONCLICK_SCRIPT: PlaywrightError("context destroyed")})

    result = LinkCollector().collect(page)

    assert result.ok is False
    assert "https://a.test/dashboard" in result.links
    assert "https://a.test/reports" not in result.links


def test_navigation_links_drop_in_page_fragments():
    page = FakePage(
        scripts={link_collector.NAVIGATION_SCRIPT: ["/pricing", "#", "#menu", "", "../help"]}
    )

    assert link_collector.navigation_links(page) == ["/pricing", "../help"]
