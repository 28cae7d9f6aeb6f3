"""Navigable application state shared by the input loop and the fetch worker.

Nothing in this module locks: callers go through ``fred_rss.app.App`` which
serializes every access behind one lock.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

from .errors import NavigationError
from .models import FeedDocument, FeedItem, FeedSource


T = TypeVar("T")


class SelectableList(Generic[T]):
    """Items with an optional cursor that wraps around at both ends."""

    def __init__(self, items: Sequence[T] = ()) -> None:
        self.items: Tuple[T, ...] = tuple(items)
        self.cursor: Optional[int] = None

    def __len__(self) -> int:
        return len(self.items)

    def select_next(self) -> None:
        if not self.items:
            return
        if self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = (self.cursor + 1) % len(self.items)

    def select_previous(self) -> None:
        if not self.items:
            return
        if self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = (self.cursor - 1) % len(self.items)

    def unselect(self) -> None:
        self.cursor = None

    def selected(self) -> Optional[T]:
        if self.cursor is None:
            return None
        return self.items[self.cursor]


class NavigationMode(enum.Enum):
    FEED_LIST = "feeds"
    ITEM_LIST = "items"


@dataclass
class DrillStack:
    """Depth of the item detail drill-down and the item it points at."""

    depth: int = 0
    index: int = 0

    def push(self, index: int) -> None:
        self.depth += 1
        self.index = index

    def pop(self) -> None:
        if self.depth <= 0:
            raise NavigationError("Already at the item list; nothing to go back to.")
        self.depth -= 1
        self.index = 0


@dataclass(frozen=True)
class FetchRequest:
    """One pending download, correlated to the feed that asked for it."""

    feed_index: int
    url: str


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the state handed to the renderer once per tick."""

    feed_names: Tuple[str, ...]
    feed_cursor: Optional[int]
    item_titles: Tuple[str, ...]
    item_cursor: Optional[int]
    mode: NavigationMode
    detail: Optional[FeedItem]
    is_loading: bool
    last_error: Optional[str]
    document_title: Optional[str]
    loaded_feed: Optional[str]
    has_document: bool
    can_activate: bool
    can_back: bool


@dataclass
class ApplicationState:
    """Feeds, the loaded document and where the user is looking."""

    feeds: SelectableList[FeedSource]
    document: Optional[SelectableList[FeedItem]] = None
    document_title: Optional[str] = None
    mode: NavigationMode = NavigationMode.FEED_LIST
    drill: DrillStack = field(default_factory=DrillStack)
    is_loading: bool = False
    loaded_feed: Optional[int] = None
    last_error: Optional[str] = None

    @classmethod
    def from_sources(cls, sources: Sequence[FeedSource]) -> "ApplicationState":
        return cls(feeds=SelectableList(sources))

    def active_list(self) -> Optional[SelectableList]:
        if self.mode is NavigationMode.FEED_LIST:
            return self.feeds
        return self.document

    def select_next(self) -> None:
        target = self.active_list()
        if target is not None:
            target.select_next()

    def select_previous(self) -> None:
        target = self.active_list()
        if target is not None:
            target.select_previous()

    def unselect(self) -> None:
        target = self.active_list()
        if target is not None:
            target.unselect()

    def toggle_view(self) -> None:
        if self.mode is NavigationMode.FEED_LIST:
            self.mode = NavigationMode.ITEM_LIST
        else:
            self.mode = NavigationMode.FEED_LIST

    @property
    def can_activate(self) -> bool:
        if self.mode is NavigationMode.FEED_LIST:
            return self.feeds.cursor is not None
        return self.document is not None and len(self.document) > 0

    @property
    def can_back(self) -> bool:
        return self.drill.depth > 0

    def activate(self) -> Optional[FetchRequest]:
        """Apply the Enter action.

        In the feed list this returns the FetchRequest for the selected feed
        (the caller dispatches it). In the item list it drills into the
        current item and returns None.
        """
        if self.mode is NavigationMode.FEED_LIST:
            if self.feeds.cursor is None:
                raise NavigationError("No feed selected.")
            source = self.feeds.items[self.feeds.cursor]
            return FetchRequest(feed_index=self.feeds.cursor, url=source.url)

        if self.document is None or not self.document.items:
            raise NavigationError("No items loaded.")
        index = self.document.cursor if self.document.cursor is not None else 0
        self.drill.push(index)
        return None

    def back(self) -> None:
        self.drill.pop()

    def begin_loading(self) -> None:
        self.is_loading = True
        self.last_error = None

    def apply_document(self, request: FetchRequest, document: FeedDocument) -> None:
        """Replace the loaded document with a freshly fetched one."""
        self.document = SelectableList(document.items)
        self.document_title = document.title
        self.loaded_feed = request.feed_index
        self.drill = DrillStack()
        self.last_error = None
        self.is_loading = False

    def apply_failure(self, request: FetchRequest, message: str) -> None:
        """Record a failed fetch, leaving any loaded document in place."""
        self.last_error = message
        self.is_loading = False

    def detail_item(self) -> Optional[FeedItem]:
        if self.drill.depth == 0 or self.document is None:
            return None
        if not 0 <= self.drill.index < len(self.document):
            return None
        return self.document.items[self.drill.index]

    def snapshot(self) -> Snapshot:
        items: List[FeedItem] = list(self.document.items) if self.document else []
        loaded_feed = None
        if self.loaded_feed is not None and self.loaded_feed < len(self.feeds):
            loaded_feed = self.feeds.items[self.loaded_feed].name
        return Snapshot(
            feed_names=tuple(source.name for source in self.feeds.items),
            feed_cursor=self.feeds.cursor,
            item_titles=tuple(item.title for item in items),
            item_cursor=self.document.cursor if self.document else None,
            mode=self.mode,
            detail=self.detail_item(),
            is_loading=self.is_loading,
            last_error=self.last_error,
            document_title=self.document_title,
            loaded_feed=loaded_feed,
            has_document=self.document is not None,
            can_activate=self.can_activate,
            can_back=self.can_back,
        )
