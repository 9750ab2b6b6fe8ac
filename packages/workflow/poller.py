from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Poller(Generic[T]):
    """Run ``fetch`` every ``interval_seconds`` on a background thread.

    A tick is skipped while the previous fetch is still running, and while the
    poller is paused (app backgrounded). ``resume`` refreshes immediately.
    """

    def __init__(
        self,
        fetch: Callable[[], T],
        interval_seconds: float,
        on_result: Optional[Callable[[T], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        name: str = "poller",
    ) -> None:
        self.fetch = fetch
        self.interval_seconds = interval_seconds
        self.on_result = on_result
        self.on_error = on_error
        self.name = name
        self.skipped = 0
        self._in_flight = threading.Lock()
        self._paused = threading.Event()
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _deliver(self, callback: Callable, value) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("%s: callback failed", self.name)

    def tick(self) -> bool:
        if self._paused.is_set() or self._stopped.is_set():
            return False
        if not self._in_flight.acquire(blocking=False):
            self.skipped += 1
            logger.debug("%s: previous request still in flight, skipping tick", self.name)
            return False
        try:
            result = self.fetch()
        except Exception as exc:
            if self.on_error is None:
                logger.warning("%s: fetch failed: %s", self.name, exc)
            else:
                self._deliver(self.on_error, exc)
            return True
        finally:
            self._in_flight.release()
        if self.on_result is not None:
            self._deliver(self.on_result, result)
        return True

    def _run(self, stopped: threading.Event) -> None:
        self.tick()
        while not stopped.wait(self.interval_seconds):
            self.tick()

    def start(self) -> None:
        if self.running:
            return
        # a thread outliving a timed-out stop() keeps its own, already set, event
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stopped,), name=self.name, daemon=True)
        self._thread.start()

    def pause(self) -> None:
        self._paused.set()

    def resume(self) -> None:
        if not self._paused.is_set():
            return
        self._paused.clear()
        self.tick()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)


def unread_counts_poller(client, interval_seconds: Optional[float] = None, **kwargs) -> Poller:
    interval = interval_seconds or client.config.unread_poll_seconds
    return Poller(client.get_unread_counts, interval, name="unread-counts", **kwargs)


def messages_poller(client, case_id: str, interval_seconds: Optional[float] = None, **kwargs) -> Poller:
    interval = interval_seconds or client.config.message_poll_seconds
    return Poller(lambda: client.get_messages(case_id), interval, name=f"messages-{case_id}", **kwargs)


__all__ = ["Poller", "messages_poller", "unread_counts_poller"]
