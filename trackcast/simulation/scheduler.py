"""
Tick Scheduler

Background refresh loop that drives a tick callback at a fixed rate, the way
a display timer would.

Architecture:
    - TickScheduler runs the callback in a daemon thread
    - The callback receives the tick time [ms since epoch], read once per tick
    - The first exception raised by the callback stops the loop and is kept
      in last_error
"""

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TickScheduler:
    """
    Fixed-rate tick loop.

    Example:
        >>> scheduler = TickScheduler(lambda now: engine.tick(entities, store.snapshot(), now), 30)
        >>> scheduler.start()
        >>> scheduler.stop()
    """

    def __init__(
        self,
        callback: Callable[[float], object],
        rate_hz: float = 30.0,
        clock: Optional[Callable[[], float]] = None,
        name: str = "trackcast-ticker",
    ) -> None:
        """
        Args:
            callback: Called once per tick with the tick time [ms]
            rate_hz: Tick rate [Hz]
            clock: Returns the current time [ms since epoch]
            name: Thread name
        """
        if rate_hz <= 0:
            raise ValueError(f"rate_hz must be > 0, got {rate_hz}")
        self.callback = callback
        self.interval = 1.0 / rate_hz
        self.clock = clock or (lambda: time.time() * 1000.0)
        self.name = name

        self.tick_count = 0
        self.last_error: Optional[BaseException] = None

        self._stop_event = threading.Event()
        self._paused = False
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start ticking in a background thread."""
        if self.is_running:
            return
        self._stop_event = threading.Event()
        self.last_error = None
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name=self.name, daemon=True
        )
        self._thread.start()
        logger.info("Tick scheduler started at %.1f Hz", 1.0 / self.interval)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """
        Stop the loop and wait for the current tick to finish.

        If the tick outlives the timeout the thread is kept, so is_running
        stays True and start() will not launch a second loop.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Tick scheduler still finishing a tick after %.2f s", timeout or 0.0)
                return
            self._thread = None
        logger.info("Tick scheduler stopped after %d ticks", self.tick_count)

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def _run(self, stop_event: threading.Event) -> None:
        """Main tick loop."""
        next_tick = time.perf_counter()

        while not stop_event.is_set():
            if not self._paused:
                try:
                    self.callback(self.clock())
                except Exception as e:
                    logger.exception("Tick %d failed", self.tick_count + 1)
                    self.last_error = e
                    break
                self.tick_count += 1

            next_tick += self.interval
            delay = next_tick - time.perf_counter()
            if delay < 0:
                # Fell behind, don't try to catch up with a burst of ticks
                next_tick = time.perf_counter()
                delay = 0.0
            stop_event.wait(delay)
