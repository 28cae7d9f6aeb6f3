"""Feed download and parsing helpers."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

import feedparser
import requests
from bs4 import BeautifulSoup

from .errors import NetworkError, ParseError
from .models import FeedDocument, FeedItem

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
UNTITLED = "(untitled)"


def fetch_feed(url: str, timeout: float = DEFAULT_TIMEOUT) -> FeedDocument:
    """Download a feed and parse it into a FeedDocument.

    Raises NetworkError when the transport fails and ParseError when the
    body cannot be read as a feed.
    """
    logger.info("Fetching feed %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        content = response.content
    except requests.RequestException as exc:
        logger.warning("Failed to fetch feed %s: %s", url, exc)
        raise NetworkError(url, f"Failed to fetch {url}: {exc}") from exc

    document = parse_feed_document(content, source=url)
    logger.info("Collected %d items from feed %s", len(document.items), url)
    return document


def parse_feed_document(content: bytes, source: str = "<bytes>") -> FeedDocument:
    """Parse raw feed bytes (RSS or Atom) into a FeedDocument."""
    parsed = feedparser.parse(content)
    channel = getattr(parsed, "feed", None) or {}
    entries = list(getattr(parsed, "entries", None) or [])
    title = channel.get("title")

    if not getattr(parsed, "version", None) or (
        getattr(parsed, "bozo", False) and not entries and not title
    ):
        reason = getattr(parsed, "bozo_exception", None) or "not an RSS or Atom feed"
        logger.warning("Failed to parse feed %s: %s", source, reason)
        raise ParseError(source, f"Failed to parse {source}: {reason}")

    items: List[FeedItem] = [_to_item(entry) for entry in entries]
    return FeedDocument(title=title or source, items=tuple(items))


def _to_item(entry) -> FeedItem:
    link = getattr(entry, "link", None) or None
    title = getattr(entry, "title", None) or link or UNTITLED
    return FeedItem(title=title, description=_entry_description(entry), link=link)


def _entry_description(entry) -> Optional[str]:
    summary = getattr(entry, "summary", None)
    if not summary:
        summary_detail = getattr(entry, "summary_detail", None)
        if summary_detail:
            summary = summary_detail.get("value")
    if not summary:
        content = getattr(entry, "content", None)
        if content:
            try:
                summary = content[0].get("value")
            except (TypeError, KeyError, IndexError, AttributeError):
                summary = None
    if not summary:
        return None
    return _strip_html(summary) or None


def _strip_html(raw_value: str) -> str:
    """Return text content extracted from HTML fragments."""
    soup = BeautifulSoup(raw_value, "html.parser")
    text = soup.get_text(separator=" ", strip=True)
    text = re.sub(r"\s+([.,;:!?])", r"\1", text)
    text = re.sub(r"\s{2,}", " ", text)
    return text.strip()
