"""Application controller: owns the state, its lock and the fetch worker."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence

from .errors import DispatchError, NavigationError
from .feeds import DEFAULT_TIMEOUT, fetch_feed
from .keys import Action
from .models import FeedSource
from .network import Fetcher, FetchWorker
from .state import ApplicationState, FetchRequest, Snapshot

logger = logging.getLogger(__name__)


def default_fetcher(timeout: float = DEFAULT_TIMEOUT) -> Fetcher:
    def fetch(url: str):
        return fetch_feed(url, timeout=timeout)

    return fetch


class App:
    """Entry point for everything the input loop does to the state.

    Every read or write of ``state`` goes through ``lock``. Methods named
    ``*_locked`` expect the caller to hold it already.
    """

    def __init__(
        self,
        sources: Sequence[FeedSource],
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self.state = ApplicationState.from_sources(sources)
        self.lock = threading.Lock()
        self.worker = FetchWorker(self.state, self.lock, fetcher or default_fetcher())
        self.running = True

    def start(self) -> None:
        self.worker.start()

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        self.worker.stop(timeout)

    def __enter__(self) -> "App":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def dispatch(self, request: FetchRequest) -> None:
        with self.lock:
            self.dispatch_locked(request)

    def dispatch_locked(self, request: FetchRequest) -> None:
        """Mark the state as loading and hand the request to the worker."""
        self.state.begin_loading()
        try:
            self.worker.submit(request)
        except DispatchError as exc:
            self.state.is_loading = False
            logger.warning("Could not dispatch fetch of %s: %s", request.url, exc)

    def handle_action(self, action: Action) -> bool:
        with self.lock:
            return self.handle_action_locked(action)

    def handle_action_locked(self, action: Action) -> bool:
        """Apply one keyboard action. Returns False once the loop should end."""
        state = self.state
        try:
            if action is Action.QUIT_OR_BACK:
                if state.can_back:
                    state.back()
                else:
                    self.running = False
            elif action is Action.TOGGLE_VIEW:
                state.toggle_view()
            elif action is Action.CURSOR_NEXT:
                state.select_next()
            elif action is Action.CURSOR_PREVIOUS:
                state.select_previous()
            elif action is Action.UNSELECT:
                state.unselect()
            elif action is Action.ACTIVATE:
                request = state.activate()
                if request is not None:
                    self.dispatch_locked(request)
        except NavigationError as exc:
            logger.debug("Ignoring %s: %s", action.name, exc)
        return self.running

    def snapshot(self) -> Snapshot:
        with self.lock:
            return self.state.snapshot()
