"""Background worker that performs feed downloads off the input loop."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

from .errors import DispatchError, FetchError
from .models import FeedDocument
from .state import ApplicationState, FetchRequest

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], FeedDocument]

_STOP = object()


class FetchWorker:
    """Consume FetchRequests one at a time and merge results into the state.

    The fetcher runs without holding ``lock``; only the merge of its result
    into ``state`` happens under it.
    """

    def __init__(
        self,
        state: ApplicationState,
        lock: threading.Lock,
        fetcher: Fetcher,
    ) -> None:
        self.state = state
        self.lock = lock
        self.fetcher = fetcher
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._closed = False

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name="fred-rss-fetch", daemon=True
        )
        self._thread.start()
        logger.debug("Fetch worker started")

    def submit(self, request: FetchRequest) -> None:
        """Enqueue a request and return immediately."""
        if self._closed:
            raise DispatchError("Fetch worker has been stopped.")
        self._queue.put(request)
        logger.debug("Queued fetch of %s (pending=%d)", request.url, self._queue.qsize())

    def stop(self, timeout: Optional[float] = None) -> None:
        """Refuse new requests, let queued ones finish and join the thread."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_STOP)
        if self._thread is not None:
            self._thread.join(timeout)
        logger.debug("Fetch worker stopped")

    def _run(self) -> None:
        while True:
            request = self._queue.get()
            try:
                if request is _STOP:
                    return
                self.process(request)
            finally:
                self._queue.task_done()

    def join_pending(self) -> None:
        """Block until every queued request has been processed."""
        self._queue.join()

    def process(self, request: FetchRequest) -> None:
        """Fetch one request and merge the outcome into the state."""
        try:
            document = self.fetcher(request.url)
        except FetchError as exc:
            logger.warning("Fetch of %s failed: %s", request.url, exc)
            with self.lock:
                self.state.apply_failure(request, str(exc))
            return
        except Exception as exc:  # noqa: BLE001 - keep the worker alive
            logger.exception("Unexpected error while fetching %s", request.url)
            with self.lock:
                self.state.apply_failure(request, f"Unexpected error: {exc}")
            return

        with self.lock:
            self.state.apply_document(request, document)
        logger.info(
            "Loaded %d items from %s", len(document.items), request.url
        )
