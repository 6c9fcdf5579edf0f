"""Background status polling.

``StatusPoller`` fires its tick once immediately, then every ``interval``
seconds until stopped. The clock and the wait function are injectable so
tests can drive several ticks without sleeping.

Usage:
    from django_bundle_orders.scheduler import start_status_polling, stop_status_polling

    start_status_polling()      # e.g. from AppConfig.ready() of the web process
    ...
    stop_status_polling(timeout=30)
"""

import logging
import threading
import time
from typing import Callable, Optional

from django.db import close_old_connections

from . import conf
from .reconciliation import poll_order_statuses

logger = logging.getLogger(__name__)


class StatusPoller:
    """Cancellable ticker around a reconciliation callable."""

    def __init__(
        self,
        tick: Callable[[], object],
        interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        wait: Optional[Callable[[float], bool]] = None,
    ):
        self.tick = tick
        self.interval = float(conf.get_poll_interval() if interval is None else interval)
        if self.interval <= 0:
            raise ValueError("Polling interval must be positive")
        self.clock = clock
        self._stop_event = threading.Event()
        # wait(seconds) returns True once a stop has been requested
        self.wait = wait or self._stop_event.wait
        self._thread: Optional[threading.Thread] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def _run_tick(self) -> None:
        try:
            self.tick()
        except Exception:
            logger.exception("Status polling tick failed")
        self.ticks += 1

    def run(self, max_ticks: Optional[int] = None) -> None:
        """Tick in the calling thread until stopped or ``max_ticks`` is reached.

        Ticks are scheduled on a fixed grid from the first one; a tick that
        overruns its slot skips the missed slots instead of firing a burst.
        """
        ticks_run = 0
        next_at = self.clock()
        while not self._stop_event.is_set():
            self._run_tick()
            ticks_run += 1
            if max_ticks is not None and ticks_run >= max_ticks:
                break

            next_at += self.interval
            now = self.clock()
            if next_at <= now:
                skipped = int((now - next_at) // self.interval) + 1
                logger.warning("Status polling tick overran by %.1fs; skipping %d slot(s)", now - next_at, skipped)
                next_at += skipped * self.interval

            if self.wait(next_at - now):
                break

    def start(self) -> "StatusPoller":
        """Run the poller in a daemon thread."""
        if self.running:
            return self
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, daemon=True, name="bundle-order-status-poller")
        self._thread.start()
        logger.info("Order status polling started (every %.0fs)", self.interval)
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop scheduling ticks. An in-flight tick is allowed to finish."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.info("Order status polling stopped after %d tick(s)", self.ticks)


def _background_tick() -> None:
    try:
        poll_order_statuses()
    finally:
        close_old_connections()


_poller: Optional[StatusPoller] = None
_poller_lock = threading.Lock()


def start_status_polling(interval: Optional[float] = None) -> StatusPoller:
    """Start the process-wide poller. Calling it again while running is a no-op."""
    global _poller
    with _poller_lock:
        if _poller is None or not _poller.running:
            _poller = StatusPoller(_background_tick, interval=interval)
            _poller.start()
        return _poller


def stop_status_polling(timeout: Optional[float] = None) -> None:
    global _poller
    with _poller_lock:
        if _poller is not None:
            _poller.stop(timeout)
            _poller = None
