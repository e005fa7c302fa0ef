"""RecurringRunner: one callback fired on a fixed interval by APScheduler."""

from __future__ import annotations

import logging
import math
import threading
import uuid
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from apscheduler.events import EVENT_JOB_MAX_INSTANCES
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from lens.config import settings
from lens.recurring import lifecycle
from lens.recurring.errors import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def _coerce_interval(interval: timedelta | float) -> timedelta:
    """Validate *interval* and return it as a timedelta."""
    if isinstance(interval, timedelta):
        seconds = interval.total_seconds()
    elif isinstance(interval, (int, float)) and not isinstance(interval, bool):
        seconds = float(interval)
    else:
        msg = f"interval must be a timedelta or a number of seconds, got {type(interval).__name__}"
        raise InvalidArgumentError(msg)
    if not math.isfinite(seconds) or seconds <= 0:
        msg = f"interval must be positive and finite, got {interval!r}"
        raise InvalidArgumentError(msg)
    return timedelta(seconds=seconds)


def _coerce_misfire_grace(seconds: float | None) -> int | None:
    """APScheduler wants None or a positive whole number of seconds."""
    if seconds is None:
        return None
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        msg = f"misfire grace must be a number of seconds, got {type(seconds).__name__}"
        raise InvalidArgumentError(msg)
    if not math.isfinite(seconds) or seconds <= 0:
        msg = f"misfire grace must be positive and finite, got {seconds!r}"
        raise InvalidArgumentError(msg)
    return math.ceil(seconds)


class RecurringRunner:
    """Fires a callback every *interval* until stopped or disposed.

    The runner owns a private ``BackgroundScheduler`` holding a single paused
    interval job.  ``start()`` arms the job, ``stop()`` pauses it, and
    ``dispose()`` shuts the scheduler down for good.  ``dispose()`` is also
    registered as a process-exit hook, and the runner works as a context
    manager that disposes on exit.

    Ticks run on APScheduler's executor threads.  At most one invocation runs
    at a time; a tick that comes due while the previous one is still running
    is skipped.

    Args:
        callback: Zero-argument callable invoked on every tick.
        interval: Time between ticks, as a timedelta or seconds.
        name: Label for log lines (default: the callback's qualified name).
        timezone: Scheduler timezone (default from settings).
    """

    def __init__(
        self,
        callback: Callable[[], Any],
        interval: timedelta | float,
        *,
        name: str | None = None,
        timezone: str | None = None,
    ) -> None:
        if callback is None:
            msg = "callback is required"
            raise InvalidArgumentError(msg)
        if not callable(callback):
            msg = f"callback must be callable, got {type(callback).__name__}"
            raise InvalidArgumentError(msg)

        self._callback = callback
        self._interval = _coerce_interval(interval)
        self._name = name or getattr(callback, "__qualname__", repr(callback))
        self._timezone = timezone or settings.scheduler_timezone
        misfire_grace_time = _coerce_misfire_grace(settings.misfire_grace_seconds)
        self._lock = threading.Lock()
        self._running = False
        self._disposed = False
        self._skipped = 0

        # Jobs added before start() are queued; next_run_time=None keeps it paused.
        self._scheduler = BackgroundScheduler(timezone=self._timezone)
        self._scheduler.add_listener(self._on_skipped, EVENT_JOB_MAX_INSTANCES)
        self._job = self._scheduler.add_job(
            self._fire,
            trigger=self._build_trigger(),
            id=uuid.uuid4().hex,
            name=self._name,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=misfire_grace_time,
            next_run_time=None,
        )
        try:
            self._scheduler.start()
            lifecycle.register_exit_hook(self.dispose)
        except BaseException:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            raise
        logger.debug(
            "Recurring task '%s' created (interval=%.3fs)",
            self._name,
            self._interval.total_seconds(),
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def interval(self) -> timedelta:
        return self._interval

    @property
    def running(self) -> bool:
        return self._running

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def skipped(self) -> int:
        """Ticks dropped because the previous invocation was still running."""
        return self._skipped

    # -- Lifecycle -------------------------------------------------------------

    def start(self) -> None:
        """Begin firing; the first tick comes one interval from now."""
        with self._lock:
            if self._disposed or self._running:
                return
            self._job.reschedule(trigger=self._build_trigger())
            self._running = True
        logger.info(
            "Recurring task '%s' started (interval=%.3fs)",
            self._name,
            self._interval.total_seconds(),
        )

    def stop(self) -> None:
        """Stop future ticks. An invocation already running is not awaited."""
        with self._lock:
            if self._disposed or not self._running:
                return
            self._job.pause()
            self._running = False
        logger.info("Recurring task '%s' stopped", self._name)

    def dispose(self) -> None:
        """Release the scheduler. Safe to call any number of times from any thread."""
        with self._lock:
            if self._disposed:
                return
            self._running = False
            try:
                self._scheduler.shutdown(wait=False)
            except Exception:
                logger.exception("Failed to shut down scheduler for '%s'", self._name)
            self._disposed = True
        lifecycle.unregister_exit_hook(self.dispose)
        logger.info("Recurring task '%s' disposed", self._name)

    def __enter__(self) -> RecurringRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    def __repr__(self) -> str:
        if self._disposed:
            state = "disposed"
        elif self._running:
            state = "running"
        else:
            state = "stopped"
        return f"<RecurringRunner {self._name!r} every {self._interval} ({state})>"

    # -- Internal --------------------------------------------------------------

    def _build_trigger(self) -> IntervalTrigger:
        return IntervalTrigger(
            seconds=self._interval.total_seconds(),
            timezone=self._timezone,
        )

    def _on_skipped(self, event) -> None:
        # Listeners run on the scheduler thread only.
        self._skipped += 1
        logger.debug("Recurring task '%s' skipped a tick (still running)", self._name)

    def _fire(self) -> None:
        """Job callback. Isolates each invocation so one failure never ends the schedule."""
        # A tick submitted just before stop()/dispose() may land afterwards.
        if not self._running:
            return
        try:
            self._callback()
        except Exception:
            logger.exception("Recurring task '%s' failed", self._name)
