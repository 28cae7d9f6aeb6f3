"""Configuration loading for fred_rss."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from xml.etree import ElementTree as ET

from .errors import ConfigError
from .feeds import DEFAULT_TIMEOUT
from .models import FeedSource

logger = logging.getLogger(__name__)

DEFAULT_FEEDS: List[FeedSource] = [
    FeedSource("Hacker News", "https://hnrss.org/frontpage"),
    FeedSource("SweClockers", "http://www.sweclockers.com/feeds/nyheter"),
    FeedSource(
        "Aftonbladet",
        "https://rss.aftonbladet.se/rss2/small/pages/sections/senastenytt/",
    ),
    FeedSource("SVT Nyheter", "https://www.svt.se/nyheter/rss.xml"),
]


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    feeds_file: Optional[str] = None
    tick_rate_ms: int = 250
    request_timeout: float = DEFAULT_TIMEOUT
    error_pause: float = 5.0
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def parse_feeds_config(path: str) -> List[FeedSource]:
    """Parse an OPML file and return the feed sources in document order."""
    logger.info("Loading feed configuration from %s", path)
    try:
        tree = ET.parse(path)
    except FileNotFoundError as exc:
        raise ConfigError(f"Feeds file not found: {path}") from exc
    except (ET.ParseError, OSError) as exc:
        raise ConfigError(f"Could not read feeds file {path}: {exc}") from exc

    body = tree.getroot().find("body")
    if body is None:
        raise ConfigError(f"{path} is missing the <body> section.")

    feeds: List[FeedSource] = []

    def walk(outline: ET.Element) -> None:
        feed_url = outline.attrib.get("xmlUrl")
        if outline.attrib.get("type") == "rss" and feed_url:
            name = outline.attrib.get("title") or outline.attrib.get("text")
            feeds.append(FeedSource(name=name or feed_url, url=feed_url))
            logger.debug("Registered feed '%s'", feed_url)
            return
        for child in outline.findall("outline"):
            walk(child)

    for outline in body.findall("outline"):
        walk(outline)

    if not feeds:
        raise ConfigError(f"No feeds found in {path}.")

    logger.info("Loaded %d feed endpoints from configuration", len(feeds))
    return feeds


def _resolve_path(base_path: Path, target_path: str) -> str:
    """Resolve a path relative to the base config file if it's not absolute."""
    target = Path(target_path)
    if target.is_absolute():
        return str(target)
    return str((base_path.parent / target).resolve())


def _number(root: ET.Element, tag: str, default, cast):
    raw = root.findtext(tag)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"<{tag}> must be a number, got {raw.strip()!r}") from exc
    if value < 0:
        raise ConfigError(f"<{tag}> must not be negative.")
    return value


def parse_app_config(path: str) -> AppConfig:
    """Parse the main application configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    try:
        root = ET.parse(config_path).getroot()
    except (ET.ParseError, OSError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    config = AppConfig()

    feeds_node = root.find("feeds")
    if feeds_node is not None and feeds_node.text and feeds_node.text.strip():
        config.feeds_file = _resolve_path(config_path, feeds_node.text.strip())

    config.tick_rate_ms = _number(root, "tick-rate-ms", config.tick_rate_ms, int)
    if config.tick_rate_ms == 0:
        raise ConfigError("<tick-rate-ms> must be positive.")
    config.request_timeout = _number(
        root, "request-timeout", config.request_timeout, float
    )
    config.error_pause = _number(root, "error-pause", config.error_pause, float)

    log_node = root.find("logging")
    if log_node is not None:
        config.logging.level = log_node.findtext("level", "INFO").strip() or "INFO"
        log_file = log_node.findtext("file")
        if log_file and log_file.strip():
            config.logging.file = _resolve_path(config_path, log_file.strip())

    return config


def load_sources(feeds_file: Optional[str]) -> List[FeedSource]:
    """Return the configured feed sources, or the built-in list when unset."""
    if not feeds_file:
        logger.info("No feeds file configured; using %d built-in feeds", len(DEFAULT_FEEDS))
        return list(DEFAULT_FEEDS)
    return parse_feeds_config(feeds_file)
