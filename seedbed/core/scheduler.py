"""Cancellable timers for debouncing and duration tracking."""

from typing import Callable, Protocol

from PySide6.QtCore import QObject, QTimer

from .utils import safe_slot


class TimerHandle(Protocol):
    """Handle to a scheduled callback."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Schedules delayed and periodic callbacks on the GUI thread."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class QtTimerHandle:
    """TimerHandle backed by a QTimer."""

    def __init__(
        self,
        timer: QTimer,
        callback: Callable[[], None],
        on_release: Callable[["QtTimerHandle"], None],
    ) -> None:
        self._timer: QTimer | None = timer
        self._callback = callback
        self._on_release = on_release
        self._repeating = not timer.isSingleShot()
        timer.timeout.connect(self._fire)

    @property
    def active(self) -> bool:
        """Check if the timer can still fire."""
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once."""
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None
        self._on_release(self)

    @safe_slot
    def _fire(self) -> None:
        if self._timer is None:
            return
        if not self._repeating:
            # Single-shot timers are spent once they fire
            self.cancel()
        self._callback()


class QtScheduler(QObject):
    """Scheduler running callbacks from QTimer timeouts."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        # Live handles are kept here so their timeout connections stay alive
        self._handles: set[QtTimerHandle] = set()

    @property
    def active_count(self) -> int:
        """Number of timers that have not fired or been cancelled."""
        return len(self._handles)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        """Run callback once after delay_ms."""
        return self._start(delay_ms, callback, single_shot=True)

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        """Run callback every interval_ms until cancelled."""
        return self._start(interval_ms, callback, single_shot=False)

    def _start(
        self, interval_ms: int, callback: Callable[[], None], single_shot: bool
    ) -> QtTimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(single_shot)
        handle = QtTimerHandle(timer, callback, self._handles.discard)
        self._handles.add(handle)
        timer.start(interval_ms)
        return handle
