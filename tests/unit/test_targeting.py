from walkthrough.core.config import CrawlConfig  # type: ignore[import]
from walkthrough.recon.targeting import TargetFilter, admit  # type: ignore[import]


def _config(**overrides) -> CrawlConfig:
    options = {"start_url": "https://a.test/", "exclude_patterns": [], "include_patterns": []}
    options.update(overrides)
    return CrawlConfig(**options)


def test_rejects_other_hosts_when_same_domain_only():
    config = _config()
    assert admit("https://a.test/x", config.start_url, config) is True
    assert admit("https://other.test/y", config.start_url, config) is False
    assert admit("https://sub.a.test/y", config.start_url, config) is False


def test_allows_other_hosts_when_same_domain_disabled():
    config = _config(same_domain_only=False)
    assert admit("https://other.test/y", config.start_url, config) is True


def test_exclude_patterns_are_case_sensitive_substrings():
    target_filter = TargetFilter.from_config(_config(exclude_patterns=["/admin"]))
    assert target_filter.admit("https://a.test/admin/users") is False
    assert target_filter.admit("https://a.test/Admin/users") is True


def test_include_patterns_require_a_match():
    target_filter = TargetFilter.from_config(_config(include_patterns=["/blog", "/news"]))
    assert target_filter.admit("https://a.test/blog/1") is True
    assert target_filter.admit("https://a.test/news") is True
    assert target_filter.admit("https://a.test/about") is False


def test_exclude_wins_over_include():
    target_filter = TargetFilter.from_config(
        _config(include_patterns=["/blog"], exclude_patterns=["draft"])
    )
    assert target_filter.admit("https://a.test/blog/draft-1") is False


def test_domain_check_runs_before_patterns():
    target_filter = TargetFilter.from_config(_config(include_patterns=["/blog"]))
    assert target_filter.admit("https://other.test/blog") is False


def test_unparsable_url_is_not_same_domain():
    target_filter = TargetFilter.from_config(_config())
    assert target_filter.is_same_domain("http://[::1") is False
