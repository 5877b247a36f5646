"""Configuration loader for collect_articles."""

from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from common.config import ConfigSingleton, find_config_path, load_yaml

load_dotenv()


@dataclass
class FetcherConfig:
    strategy: str = "http"  # "http" or "browser"
    request_timeout: float = 30.0
    navigation_timeout: float = 30.0
    page_timeout: float = 30.0
    wait_timeout: float = 10.0
    block_resources: bool = True
    headless: bool = True
    user_agent: Optional[str] = None


@dataclass
class ScrapeConfig:
    request_delay: float = 2.5
    max_articles: int = 50
    max_consecutive_failures: int = 3  # 0 disables early abort


@dataclass
class OutputConfig:
    directory: str = "output"
    extension: str = "txt"


@dataclass
class RateLimitConfig:
    max_requests: int = 3
    window_seconds: float = 60.0


@dataclass
class CollectorConfig:
    fetcher: FetcherConfig = field(default_factory=FetcherConfig)
    scrape: ScrapeConfig = field(default_factory=ScrapeConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


def load_config(config_name: str | None = None) -> CollectorConfig:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension) or a path.
                    If None, uses CONFIG_ENV env var or "default".

    Returns:
        Loaded CollectorConfig object
    """
    path = find_config_path(config_name)
    return parse_config(load_yaml(path))


def parse_config(data: dict) -> CollectorConfig:
    """Parse config dictionary into CollectorConfig object."""
    fetcher_data = data.get("fetcher", {}) or {}
    scrape_data = data.get("scrape", {}) or {}
    output_data = data.get("output", {}) or {}
    rate_data = data.get("rate_limit", {}) or {}

    fetcher = FetcherConfig(
        strategy=fetcher_data.get("strategy", "http"),
        request_timeout=float(fetcher_data.get("request_timeout", 30.0)),
        navigation_timeout=float(fetcher_data.get("navigation_timeout", 30.0)),
        page_timeout=float(fetcher_data.get("page_timeout", 30.0)),
        wait_timeout=float(fetcher_data.get("wait_timeout", 10.0)),
        block_resources=fetcher_data.get("block_resources", True),
        headless=fetcher_data.get("headless", True),
        user_agent=fetcher_data.get("user_agent"),
    )

    scrape = ScrapeConfig(
        request_delay=float(scrape_data.get("request_delay", 2.5)),
        max_articles=int(scrape_data.get("max_articles", 50)),
        max_consecutive_failures=int(scrape_data.get("max_consecutive_failures", 3)),
    )

    output = OutputConfig(
        directory=output_data.get("directory", "output"),
        extension=output_data.get("extension", "txt"),
    )

    rate_limit = RateLimitConfig(
        max_requests=int(rate_data.get("max_requests", 3)),
        window_seconds=float(rate_data.get("window_seconds", 60.0)),
    )

    return CollectorConfig(
        fetcher=fetcher,
        scrape=scrape,
        output=output,
        rate_limit=rate_limit,
    )


_manager: ConfigSingleton[CollectorConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
