"""Tracking of a single fallible background operation."""

import logging
from typing import Any, Callable

from PySide6.QtCore import QObject, Signal

from .scheduler import Scheduler, TimerHandle
from .workers import Executor

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000

# Elapsed seconds at which the loading message escalates
STILL_SEARCHING_AFTER = 2
TAKING_LONGER_AFTER = 3

SEARCHING_MESSAGE = "Searching for repositories..."
STILL_SEARCHING_MESSAGE = "Still searching... ({seconds}s)"
TAKING_LONGER_MESSAGE = (
    "This is taking longer than expected. Large home directories can take "
    "a while to scan."
)


def loading_message(elapsed: int) -> str:
    """Return the progress message for an operation running elapsed seconds."""
    if elapsed < STILL_SEARCHING_AFTER:
        return SEARCHING_MESSAGE
    return STILL_SEARCHING_MESSAGE.format(seconds=elapsed)


def loading_hint(elapsed: int) -> str | None:
    """Return the extra hint shown for slow operations, if any."""
    if elapsed >= TAKING_LONGER_AFTER:
        return TAKING_LONGER_MESSAGE
    return None


class AsyncOperation(QObject):
    """Wraps a fallible call as {is_loading, error, data} state.

    Each run() starts a new generation. Completions belonging to an older
    generation are dropped, so a slow early request can never overwrite the
    result of a later one, and reset() discards whatever is still in
    flight.
    """

    started = Signal()
    succeeded = Signal(object)
    failed = Signal(str)
    changed = Signal()
    elapsed_changed = Signal(int)

    def __init__(
        self,
        executor: Executor,
        scheduler: Scheduler,
        name: str = "operation",
        describe_error: Callable[[Exception], str] | None = None,
        fallback_message: str = "Operation failed",
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._executor = executor
        self._scheduler = scheduler
        self._name = name
        self._describe_error = describe_error
        self._fallback_message = fallback_message

        self._generation = 0
        self._is_loading = False
        self._error = ""
        self._data: Any = None
        self._elapsed = 0
        self._ticker: TimerHandle | None = None

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str:
        """Human-readable message of the last failure, or empty."""
        return self._error

    @property
    def data(self) -> Any:
        """Result of the last successful run, None after a failure."""
        return self._data

    @property
    def elapsed(self) -> int:
        """Whole seconds the current run has been loading."""
        return self._elapsed

    @property
    def generation(self) -> int:
        return self._generation

    def run(self, fn: Callable[..., Any], *args: Any) -> int:
        """Start fn(*args) in the background and return its generation."""
        self._generation += 1
        generation = self._generation

        self._error = ""
        self._is_loading = True
        self._elapsed = 0
        self._start_ticker()

        logger.debug(f"{self._name}: starting run {generation}")
        self.started.emit()
        self.changed.emit()

        self._executor.submit(
            fn,
            args,
            lambda result: self._on_success(generation, result),
            lambda exc: self._on_failure(generation, exc),
        )
        return generation

    def reset(self) -> None:
        """Discard in-flight work and clear all state."""
        self._generation += 1
        self._stop_ticker()
        self._is_loading = False
        self._error = ""
        self._data = None
        self._elapsed = 0
        self.changed.emit()

    def clear_error(self) -> None:
        """Clear the error message without touching other state."""
        if self._error:
            self._error = ""
            self.changed.emit()

    def _on_success(self, generation: int, result: Any) -> None:
        if generation != self._generation:
            logger.debug(f"{self._name}: dropping stale result of run {generation}")
            return

        self._stop_ticker()
        self._data = result
        self._is_loading = False
        self.succeeded.emit(result)
        self.changed.emit()

    def _on_failure(self, generation: int, exc: Exception) -> None:
        if generation != self._generation:
            logger.debug(f"{self._name}: dropping stale error of run {generation}")
            return

        logger.warning(f"{self._name} failed: {exc}")
        self._stop_ticker()
        self._data = None
        self._error = self._message_for(exc)
        self._is_loading = False
        self.failed.emit(self._error)
        self.changed.emit()

    def _message_for(self, exc: Exception) -> str:
        if self._describe_error is not None:
            return self._describe_error(exc)
        return str(exc) or self._fallback_message

    def _start_ticker(self) -> None:
        self._stop_ticker()
        self._ticker = self._scheduler.call_every(TICK_INTERVAL_MS, self._on_tick)

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _on_tick(self) -> None:
        if not self._is_loading:
            self._stop_ticker()
            return
        self._elapsed += 1
        self.elapsed_changed.emit(self._elapsed)
        self.changed.emit()
