"""Debounced search query."""

from PySide6.QtCore import QObject, Signal

from .scheduler import Scheduler, TimerHandle

DEFAULT_DEBOUNCE_MS = 300


class DebouncedQuery(QObject):
    """Turns a rapidly changing search string into a stable value.

    Every call to set_text() restarts the quiet interval. Once the interval
    elapses without further input, the current text becomes the stable
    value and value_changed is emitted if it differs from the previous one.
    The empty string is a valid stable value and means "no filter".
    """

    value_changed = Signal(str)

    def __init__(
        self,
        scheduler: Scheduler,
        interval_ms: int = DEFAULT_DEBOUNCE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._scheduler = scheduler
        self._interval_ms = interval_ms
        self._text = ""
        self._value = ""
        self._handle: TimerHandle | None = None

    @property
    def text(self) -> str:
        """The raw text as last typed."""
        return self._text

    @property
    def value(self) -> str:
        """The last stable value."""
        return self._value

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def pending(self) -> bool:
        """Check if an emission is scheduled."""
        return self._handle is not None and self._handle.active

    def set_text(self, text: str) -> None:
        """Record a new raw value and restart the quiet interval."""
        self._text = text
        self.cancel()
        self._handle = self._scheduler.call_later(self._interval_ms, self._settle)

    def flush(self) -> None:
        """Settle a pending value immediately."""
        if self.pending:
            self.cancel()
            self._settle()

    def cancel(self) -> None:
        """Drop any pending emission."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _settle(self) -> None:
        self._handle = None
        if self._text == self._value:
            return
        self._value = self._text
        self.value_changed.emit(self._value)
