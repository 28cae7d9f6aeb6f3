"""Command-line interface and main loop for the fred_rss application."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console, RenderableType
from rich.live import Live

from .app import App, default_fetcher
from .config import AppConfig, load_sources, parse_app_config
from .errors import ConfigError
from .keys import action_for
from .terminal import TerminalSession
from .ui import build_layout, render_error

logger = logging.getLogger(__name__)

KeyReader = Callable[[float], Optional[str]]
Renderer = Callable[[RenderableType], None]


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Browse RSS and Atom feeds in the terminal."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the main configuration XML file.",
    )
    parser.add_argument(
        "--feeds",
        default=None,
        metavar="PATH",
        help="OPML file listing the feeds. Overrides config.",
    )
    parser.add_argument(
        "--tick-rate",
        type=int,
        default=None,
        metavar="MS",
        help="Redraw interval in milliseconds. Overrides config.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file. Overrides config.",
    )
    return parser


def configure_logging(
    level_name: str, log_file: Optional[str] = None, console: bool = True
) -> None:
    """Initialise logging according to options.

    With ``console`` disabled (the terminal UI owns the screen) records only
    go to ``log_file``, or nowhere when no file is given.
    """
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(
            "Logger initialised with level %s and file output to %s",
            level_name.upper(),
            log_path,
        )
    elif not console:
        root_logger.addHandler(logging.NullHandler())
    else:
        logger.debug(
            "Logger initialised with console output at level %s", level_name.upper()
        )


def run_app(
    app: App,
    read_key: KeyReader,
    render: Renderer,
    tick_rate: float = 0.25,
) -> None:
    """Drive the render/input loop until the user quits.

    The lock is taken for the render and for the handling of one key, and
    released while waiting for input.
    """
    last_tick = time.monotonic()
    while app.running:
        with app.lock:
            render(build_layout(app.state.snapshot()))

        timeout = max(tick_rate - (time.monotonic() - last_tick), 0.0)
        action = action_for(read_key(timeout))
        if action is not None:
            app.handle_action(action)

        if time.monotonic() - last_tick >= tick_rate:
            last_tick = time.monotonic()


def _prepare(args: argparse.Namespace, app_config: AppConfig):
    log_level = args.log_level or app_config.logging.level
    log_file = args.log_file or app_config.logging.file
    try:
        configure_logging(log_level, log_file, console=False)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    if args.tick_rate is not None:
        if args.tick_rate <= 0:
            raise ConfigError("--tick-rate must be positive.")
        app_config.tick_rate_ms = args.tick_rate

    return load_sources(args.feeds or app_config.feeds_file)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not sys.stdin.isatty():
        print("fred_rss needs an interactive terminal.", file=sys.stderr)
        return 1

    console = Console()
    error: Optional[str] = None
    pause = AppConfig.error_pause
    try:
        with TerminalSession(console) as session:
            try:
                app_config = parse_app_config(args.config) if args.config else AppConfig()
                pause = app_config.error_pause
                sources = _prepare(args, app_config)
            except ConfigError as exc:
                error = str(exc)
                console.print(render_error(error))
                time.sleep(pause)
                return 1

            logger.info("Starting with %d feeds", len(sources))
            app = App(sources, fetcher=default_fetcher(app_config.request_timeout))
            with app, Live(console=console, auto_refresh=False) as live:
                run_app(
                    app,
                    session.read_key,
                    lambda renderable: live.update(renderable, refresh=True),
                    tick_rate=app_config.tick_rate_ms / 1000.0,
                )
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1
    finally:
        if error:
            print(f"Configuration error: {error}", file=sys.stderr)

    return 0
