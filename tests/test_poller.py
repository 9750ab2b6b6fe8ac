import threading

from packages.core.config import PortalConfig
from packages.workflow.poller import Poller, unread_counts_poller


def test_tick_delivers_result() -> None:
    results = []
    poller = Poller(lambda: 7, interval_seconds=60, on_result=results.append)
    assert poller.tick() is True
    assert results == [7]


def test_tick_skipped_while_previous_request_in_flight() -> None:
    nested = []

    def fetch():
        # a timer firing while this request is still running
        nested.append(poller.tick())
        return "done"

    poller = Poller(fetch, interval_seconds=60)
    assert poller.tick() is True
    assert nested == [False]
    assert poller.skipped == 1


def test_paused_poller_does_not_fetch_and_resume_refreshes() -> None:
    calls = []
    poller = Poller(lambda: calls.append("fetch"), interval_seconds=60)
    poller.pause()
    assert poller.tick() is False
    assert calls == []

    poller.resume()
    assert calls == ["fetch"]
    assert poller.paused is False


def test_fetch_errors_reported_and_lock_released() -> None:
    errors = []

    def boom():
        raise RuntimeError("offline")

    poller = Poller(boom, interval_seconds=60, on_error=errors.append)
    assert poller.tick() is True
    assert poller.tick() is True
    assert [str(e) for e in errors] == ["offline", "offline"]


def test_background_thread_fetches_immediately_and_stops() -> None:
    fetched = threading.Event()
    poller = Poller(fetched.set, interval_seconds=60)
    poller.start()
    try:
        assert fetched.wait(2.0)
        assert poller.running
    finally:
        poller.stop(timeout=2.0)
    assert not poller.running
    assert poller.tick() is False


class _Client:
    config = PortalConfig(unread_poll_seconds=45)

    def get_unread_counts(self):
        return {"total": 0}


def test_unread_counts_poller_uses_configured_interval() -> None:
    poller = unread_counts_poller(_Client())
    assert poller.interval_seconds == 45
    assert poller.name == "unread-counts"


def test_raising_callback_does_not_end_polling() -> None:
    seen = []
    twice = threading.Event()

    def on_result(value):
        seen.append(value)
        if len(seen) >= 2:
            twice.set()
        raise ValueError("render failed")

    poller = Poller(lambda: "counts", interval_seconds=0.01, on_result=on_result)
    poller.start()
    try:
        assert twice.wait(2.0)
        assert poller.running
    finally:
        poller.stop(timeout=2.0)


def test_raising_error_handler_is_contained() -> None:
    def boom():
        raise RuntimeError("offline")

    def on_error(exc):
        raise ValueError("handler broke")

    poller = Poller(boom, interval_seconds=60, on_error=on_error)
    assert poller.tick() is True
    assert poller.tick() is True


def test_restart_after_timed_out_stop_runs_one_loop() -> None:
    release = threading.Event()
    entered = threading.Event()

    def fetch():
        entered.set()
        release.wait(2.0)

    poller = Poller(fetch, interval_seconds=0.01)
    poller.start()
    assert entered.wait(2.0)
    old = poller._thread
    poller.stop(timeout=0.01)
    assert old.is_alive()

    poller.start()
    release.set()
    old.join(2.0)
    assert not old.is_alive()
    assert poller.running
    poller.stop(timeout=2.0)
