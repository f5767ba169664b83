"""In-process timer that drives the cancellation check for single-process deployments.

Celery beat runs the same job when a worker is deployed; either way the work
is ``worker_jobs.check_cancellations``.
"""
import logging
import threading
from typing import Callable

from skyreserve.core.config import settings
from skyreserve.tasks import worker_jobs

logger = logging.getLogger(__name__)


class CancellationScheduler:
    def __init__(self, job: Callable[[], dict] | None = None, interval_seconds: float | None = None):
        self._job = job or worker_jobs.check_cancellations
        self.interval_seconds = interval_seconds or settings.CANCELLATION_CHECK_INTERVAL_SECONDS
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the loop; returns False if it was already running."""
        with self._lock:
            if self.running:
                return False
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._loop, args=(self._stop_event,), name="cancellation-scheduler", daemon=True,
            )
            self._thread.start()
        logger.info("Cancellation status scheduler started (checks every %ss)", self.interval_seconds)
        return True

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._lock:
            thread, self._thread = self._thread, None
            self._stop_event.set()
        if thread is not None:
            thread.join(timeout)
            logger.info("Cancellation status scheduler stopped")

    def run_once(self) -> dict:
        try:
            result = self._job()
        except Exception:
            # worker_jobs.check_cancellations never raises; injected jobs may
            logger.exception("Cancellation check crashed")
            result = {"skipped": True, "reason": "crashed"}
        self.runs += 1
        return result

    def _loop(self, stop_event: threading.Event) -> None:
        # first run is immediate, then one per interval
        while not stop_event.is_set():
            self.run_once()
            if stop_event.wait(self.interval_seconds):
                break


scheduler = CancellationScheduler()
