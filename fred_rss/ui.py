"""Rendering of a state snapshot with rich."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Group, RenderableType
from rich.layout import Layout
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .state import NavigationMode, Snapshot

APP_TITLE = "fred_rss"
HIGHLIGHT = ">> "
FOCUSED_BORDER = "cyan"
IDLE_BORDER = "white"


def _list_body(entries: Sequence[str], cursor: Optional[int], empty: str) -> Text:
    if not entries:
        return Text(empty, style="dim")
    text = Text()
    for index, entry in enumerate(entries):
        if index:
            text.append("\n")
        if index == cursor:
            text.append(HIGHLIGHT + entry, style="bold on grey23")
        else:
            text.append(" " * len(HIGHLIGHT) + entry)
    return text


def feeds_panel(snapshot: Snapshot) -> Panel:
    focused = snapshot.mode is NavigationMode.FEED_LIST
    return Panel(
        _list_body(snapshot.feed_names, snapshot.feed_cursor, "No feeds configured."),
        title=APP_TITLE,
        border_style=FOCUSED_BORDER if focused else IDLE_BORDER,
    )


def items_panel(snapshot: Snapshot) -> Panel:
    focused = snapshot.mode is NavigationMode.ITEM_LIST
    if snapshot.has_document:
        empty = "This feed has no items."
    else:
        empty = "Select a feed and press Enter."
    title = "News"
    if snapshot.document_title:
        title = f"News: {escape(snapshot.document_title)}"
    return Panel(
        _list_body(snapshot.item_titles, snapshot.item_cursor, empty),
        title=title,
        border_style=FOCUSED_BORDER if focused else IDLE_BORDER,
    )


def detail_panel(snapshot: Snapshot) -> Panel:
    item = snapshot.detail
    body = Text()
    if item is not None:
        body.append(item.title, style="bold")
        if item.link:
            body.append("\n" + item.link, style="underline dim")
        body.append("\n\n")
        body.append(item.description or "No description.")
    return Panel(body, title="Item", border_style=FOCUSED_BORDER)


def status_line(snapshot: Snapshot) -> Text:
    if snapshot.is_loading:
        status = Text("Loading...", style="yellow")
    elif snapshot.last_error:
        status = Text(f"Fetch failed: {snapshot.last_error}", style="red")
    elif snapshot.loaded_feed:
        status = Text(f"Showing {snapshot.loaded_feed}", style="green")
    else:
        status = Text("")

    hints = ["j/k move", "h unselect", "^W switch"]
    if snapshot.can_activate:
        hints.append("Enter open")
    hints.append("q back" if snapshot.can_back else "q quit")
    status.append("  " + " | ".join(hints), style="dim")
    return status


def build_layout(snapshot: Snapshot) -> RenderableType:
    """Return the full-screen renderable for one tick."""
    layout = Layout()
    layout.split_column(
        Layout(name="main", ratio=1),
        Layout(status_line(snapshot), name="status", size=1),
    )
    if snapshot.detail is not None and snapshot.mode is NavigationMode.ITEM_LIST:
        layout["main"].update(detail_panel(snapshot))
    else:
        layout["main"].split_column(
            Layout(feeds_panel(snapshot), name="feeds"),
            Layout(items_panel(snapshot), name="items"),
        )
    return layout


def render_error(message: str) -> RenderableType:
    return Group(
        Panel(Text(message, style="red"), title="Configuration error"),
        Text("Exiting...", style="dim"),
    )
