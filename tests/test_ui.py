import io

from rich.console import Console

from fred_rss.models import FeedSource
from fred_rss.state import ApplicationState, FetchRequest
from fred_rss.ui import build_layout, render_error


def _render(renderable):
    console = Console(file=io.StringIO(), width=80, height=24, record=True)
    console.print(renderable)
    return console.export_text()


def test_layout_lists_feeds_and_highlights_cursor(sources):
    state = ApplicationState.from_sources(sources)
    state.select_next()

    text = _render(build_layout(state.snapshot()))

    assert "fred_rss" in text
    assert ">> Example" in text
    assert "Other" in text
    assert "Select a feed and press Enter." in text
    assert "Enter open" in text
    assert "q quit" in text


def test_layout_shows_loading_and_errors(sources):
    state = ApplicationState.from_sources(sources)
    state.begin_loading()
    assert "Loading..." in _render(build_layout(state.snapshot()))

    state.apply_failure(FetchRequest(0, sources[0].url), "connection refused")
    assert "Fetch failed: connection refused" in _render(build_layout(state.snapshot()))


def test_layout_shows_items_and_detail(sources, make_document):
    state = ApplicationState.from_sources(sources)
    state.apply_document(FetchRequest(0, sources[0].url), make_document(2, "[Daily]"))

    text = _render(build_layout(state.snapshot()))
    assert "News: [Daily]" in text
    assert "Item 1" in text
    assert "Showing Example" in text

    state.toggle_view()
    state.select_next()
    state.activate()
    text = _render(build_layout(state.snapshot()))

    assert "Item 0" in text
    assert "Body 0" in text
    assert "http://x/0" in text
    assert "q back" in text


def test_layout_for_empty_feed(make_document):
    state = ApplicationState.from_sources([FeedSource("Empty", "http://e/feed")])
    state.apply_document(FetchRequest(0, "http://e/feed"), make_document(0))

    assert "This feed has no items." in _render(build_layout(state.snapshot()))


def test_render_error_shows_message():
    text = _render(render_error("Config file not found: x.xml"))

    assert "Configuration error" in text
    assert "Config file not found: x.xml" in text


def test_layout_shows_lists_when_feed_list_focused_while_drilled_in(sources, make_document):
    state = ApplicationState.from_sources(sources)
    state.apply_document(FetchRequest(0, sources[0].url), make_document(2))
    state.toggle_view()
    state.activate()
    state.toggle_view()
    state.select_next()

    text = _render(build_layout(state.snapshot()))

    assert ">> Example" in text
    assert "Item 1" in text
    assert "Body 0" not in text
    assert "q back" in text
