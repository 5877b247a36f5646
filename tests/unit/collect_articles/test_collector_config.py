"""Tests for collect_articles.config module."""

from collect_articles.config import (
    CollectorConfig,
    get_config,
    load_config,
    parse_config,
    reset_config,
    set_config,
)


class TestParseConfig:
    def test_empty_dict_uses_defaults(self) -> None:
        config = parse_config({})
        assert config == CollectorConfig()
        assert config.fetcher.strategy == "http"
        assert config.scrape.request_delay == 2.5
        assert config.scrape.max_articles == 50
        assert config.scrape.max_consecutive_failures == 3
        assert config.rate_limit.max_requests == 3
        assert config.rate_limit.window_seconds == 60.0

    def test_sections_override_defaults(self) -> None:
        config = parse_config({
            "fetcher": {"strategy": "browser", "headless": False, "wait_timeout": 3},
            "scrape": {"request_delay": 0, "max_consecutive_failures": 0},
            "output": {"directory": "out", "extension": "md"},
        })
        assert config.fetcher.strategy == "browser"
        assert config.fetcher.headless is False
        assert config.fetcher.wait_timeout == 3.0
        assert config.scrape.request_delay == 0.0
        assert config.scrape.max_consecutive_failures == 0
        assert config.output.directory == "out"
        assert config.output.extension == "md"

    def test_null_sections_tolerated(self) -> None:
        assert parse_config({"fetcher": None, "scrape": None}) == CollectorConfig()


class TestLoadConfig:
    def test_bundled_test_config(self) -> None:
        config = load_config("test")
        assert config.scrape.request_delay == 0
        assert config.scrape.max_consecutive_failures == 0
        assert config.output.directory == "output-test"

    def test_bundled_browser_config(self) -> None:
        assert load_config("browser").fetcher.strategy == "browser"

    def test_yaml_path(self, tmp_path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text("scrape:\n  max_articles: 10\n")
        assert load_config(str(path)).scrape.max_articles == 10


class TestConfigSingleton:
    def test_set_get_reset(self) -> None:
        custom = parse_config({"scrape": {"max_articles": 5}})
        set_config(custom)
        try:
            assert get_config() is custom
        finally:
            reset_config()
