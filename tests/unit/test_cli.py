import json

import walkthrough.cli as cli  # type: ignore[import]
import walkthrough.core.config as config_module  # type: ignore[import]
from tests.helpers.walkthrough_imports import CrawlReport, DiscoveredPage, TerminationReason
from walkthrough.recon.crawler import BrowserSessionError  # type: ignore[import]


class FakeCrawler:
    instances = []

    def __init__(self, config):
        self.config = config
        FakeCrawler.instances.append(self)

    def run(self):
        return CrawlReport(
            start_url=self.config.start_url,
            pages=[DiscoveredPage(url=self.config.start_url, depth=0)],
            termination=TerminationReason.FRONTIER_EXHAUSTED,
            visited=[self.config.start_url],
        )


def test_parse_arguments_defaults():
    args = cli.parse_arguments(["https://a.test/"])

    assert args.url == "https://a.test/"
    assert args.max_depth is None
    assert args.no_forms is False
    assert args.headless is None


def test_run_cli_builds_config_and_saves_report(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)
    monkeypatch.setattr(cli, "Crawler", FakeCrawler)
    routes = tmp_path / "routes.txt"
    routes.write_text("/hidden\n", encoding="utf-8")
    report_path = tmp_path / "out.json"

    exit_code = cli.run_cli(
        [
            "https://a.test/",
            "--max-depth", "1",
            "--exclude", "/admin,/logout",
            "--no-forms",
            "--routes", str(routes),
            "--report", str(report_path),
        ]
    )

    assert exit_code == 0
    config = FakeCrawler.instances[-1].config
    assert config.max_depth == 1
    assert config.exclude_patterns == ["/admin", "/logout"]
    assert config.auto_fill_forms is False
    assert config.seed_routes == ["/hidden"]
    assert json.loads(report_path.read_text(encoding="utf-8"))["pages"][0]["url"] == "https://a.test/"


def test_run_cli_reports_browser_failure(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)

    class BrokenCrawler(FakeCrawler):
        def run(self):
            raise BrowserSessionError("Could not launch Chromium: missing executable")

    monkeypatch.setattr(cli, "Crawler", BrokenCrawler)

    exit_code = cli.run_cli(["https://a.test/", "--report", str(tmp_path / "out.json")])

    assert exit_code == 1
    assert "Could not launch Chromium" in capsys.readouterr().out
