"""
Module providing the periodic announcement scheduler.
"""

import logging
import threading
from typing import Callable, Optional

ANNOUNCE_INTERVAL = 30.0


class AnnouncementScheduler:
    """
    Runs a callback on a background thread, once immediately and then repeatedly
    with a fixed delay between the end of one run and the start of the next, so
    runs never overlap.

    Exceptions raised by the callback are logged, and do not stop the schedule.
    """

    def __init__(self, callback: Callable[[], object], interval: Optional[float] = None):
        if interval is None:
            interval = ANNOUNCE_INTERVAL
        if interval <= 0:
            raise ValueError(f"Announcement interval must be positive, got {interval}.")
        self.logger = logging.getLogger(__name__)
        self.callback = callback
        self.interval = interval
        self._cancel = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self):
        return self._thread is not None

    def start(self):
        """
        Starts the schedule, running the callback straight away.

        :raises RuntimeError: If the schedule is already running.
        """
        if self._thread is not None:
            raise RuntimeError("Announcement scheduler already running!")
        self._cancel.clear()
        self._thread = threading.Thread(
            target=self._run, name="mdns-announcer", daemon=True
        )
        self._thread.start()

    def stop(self):
        """
        Stops the schedule. A run that is already in progress is allowed to finish.
        """
        if self._thread is None:
            return
        self._cancel.set()
        if self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def _run(self):
        while not self._cancel.is_set():
            self._run_once()
            self._cancel.wait(self.interval)

    def _run_once(self):
        try:
            self.callback()
        except Exception:
            self.logger.exception("Scheduled announcement failed.")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
