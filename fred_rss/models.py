"""Shared data models for fred_rss."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class FeedSource:
    """A configured feed, identified by its position in the feed list."""

    name: str
    url: str


@dataclass(frozen=True)
class FeedItem:
    """Single entry of a parsed feed."""

    title: str
    description: Optional[str] = None
    link: Optional[str] = None


@dataclass(frozen=True)
class FeedDocument:
    """Parsed feed: channel title plus its items in feed order."""

    title: str
    items: Tuple[FeedItem, ...] = field(default_factory=tuple)
