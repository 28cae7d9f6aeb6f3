import logging
import threading
import types

import pytest

from fred_rss import cli
from fred_rss.app import App
from fred_rss.keys import CTRL_W
from fred_rss.models import FeedSource
from fred_rss.state import NavigationMode


@pytest.fixture
def clean_root_logger():
    original_handlers = list(logging.getLogger().handlers)
    original_level = logging.getLogger().level
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)
    try:
        yield logging.getLogger()
    finally:
        for handler in logging.getLogger().handlers[:]:
            logging.getLogger().removeHandler(handler)
            handler.close()
        for handler in original_handlers:
            logging.getLogger().addHandler(handler)
        logging.getLogger().setLevel(original_level)


def test_configure_logging_defaults_to_console_only(clean_root_logger):
    cli.configure_logging("INFO")

    handlers = clean_root_logger.handlers
    assert any(isinstance(handler, logging.StreamHandler) for handler in handlers)
    assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)


def test_configure_logging_with_log_file_creates_file_handler(clean_root_logger, tmp_path):
    log_path = tmp_path / "nested" / "custom.log"
    cli.configure_logging("DEBUG", str(log_path), console=False)

    assert log_path.exists()
    handlers = clean_root_logger.handlers
    assert [type(handler) for handler in handlers] == [logging.FileHandler]
    assert clean_root_logger.level == logging.DEBUG


def test_configure_logging_without_console_or_file_is_silent(clean_root_logger):
    cli.configure_logging("INFO", console=False)

    handlers = clean_root_logger.handlers
    assert [type(handler) for handler in handlers] == [logging.NullHandler]


def test_configure_logging_rejects_unknown_level(clean_root_logger):
    with pytest.raises(ValueError):
        cli.configure_logging("LOUD")


def test_run_app_drives_navigation_and_fetch(make_document):
    gate = threading.Event()

    def fetcher(url):
        gate.wait(5)
        return make_document(3)

    app = App([FeedSource("Example", "http://x/feed")], fetcher=fetcher)
    frames = []
    loading_seen = []

    def wait_for_fetch(timeout):
        loading_seen.append(app.state.is_loading)
        gate.set()
        app.worker.join_pending()
        return None

    script = ["j", "\r", wait_for_fetch, CTRL_W, "j", "j", "\r", "q", "q"]

    def read_key(timeout):
        assert timeout >= 0
        step = script.pop(0)
        return step(timeout) if callable(step) else step

    with app:
        cli.run_app(app, read_key, frames.append, tick_rate=0.01)

    assert script == []
    assert loading_seen == [True]
    assert not app.running
    assert app.state.mode is NavigationMode.ITEM_LIST
    assert app.state.document.cursor == 1
    assert app.state.drill.depth == 0
    assert len(frames) == 9


def test_main_requires_a_terminal(monkeypatch, capsys):
    monkeypatch.setattr(cli.sys, "stdin", types.SimpleNamespace(isatty=lambda: False))

    assert cli.main([]) == 1
    assert "interactive terminal" in capsys.readouterr().err


class _FakeSession:
    instances = []

    def __init__(self, console=None):
        self.entered = False
        self.exited = False
        _FakeSession.instances.append(self)

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, *exc_info):
        self.exited = True

    def read_key(self, timeout):
        return "q"


def test_main_config_error_pauses_and_restores_terminal(monkeypatch, tmp_path, capsys):
    _FakeSession.instances = []
    pauses = []
    monkeypatch.setattr(cli.sys, "stdin", types.SimpleNamespace(isatty=lambda: True))
    monkeypatch.setattr(cli, "TerminalSession", _FakeSession)
    monkeypatch.setattr(cli.time, "sleep", pauses.append)

    exit_code = cli.main(["--config", str(tmp_path / "missing.xml")])

    assert exit_code == 1
    assert pauses == [5.0]
    session = _FakeSession.instances[0]
    assert session.entered and session.exited
    assert "Configuration error: Config file not found" in capsys.readouterr().err


def test_main_reports_unexpected_errors_after_restoring_terminal(monkeypatch, capsys):
    _FakeSession.instances = []
    monkeypatch.setattr(cli.sys, "stdin", types.SimpleNamespace(isatty=lambda: True))
    monkeypatch.setattr(cli, "TerminalSession", _FakeSession)
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)

    def exploding_run_app(*args, **kwargs):
        raise RuntimeError("render exploded")

    monkeypatch.setattr(cli, "run_app", exploding_run_app)

    assert cli.main([]) == 1
    assert _FakeSession.instances[0].exited
    assert "Unexpected error: render exploded" in capsys.readouterr().err


def test_main_uses_configured_pause_for_bad_feeds(monkeypatch, tmp_path, capsys):
    _FakeSession.instances = []
    pauses = []
    config = tmp_path / "config.xml"
    config.write_text(
        "<config><feeds>feeds.xml</feeds><error-pause>0.5</error-pause></config>",
        encoding="utf-8",
    )
    (tmp_path / "feeds.xml").write_text("<opml/>", encoding="utf-8")
    monkeypatch.setattr(cli.sys, "stdin", types.SimpleNamespace(isatty=lambda: True))
    monkeypatch.setattr(cli, "TerminalSession", _FakeSession)
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli.time, "sleep", pauses.append)

    exit_code = cli.main(["--config", str(config)])

    assert exit_code == 1
    assert pauses == [0.5]
    assert _FakeSession.instances[0].exited
    assert "missing the <body> section" in capsys.readouterr().err


def test_main_runs_until_quit(monkeypatch, capsys):
    _FakeSession.instances = []
    monkeypatch.setattr(cli.sys, "stdin", types.SimpleNamespace(isatty=lambda: True))
    monkeypatch.setattr(cli, "TerminalSession", _FakeSession)
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)

    assert cli.main(["--tick-rate", "10"]) == 0
    assert _FakeSession.instances[0].exited
