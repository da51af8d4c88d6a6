"""Background execution of blocking collaborator calls."""

import atexit
import logging
from typing import Any, Callable, Protocol

from PySide6.QtCore import QObject, QThread, Signal

from .utils import safe_slot

logger = logging.getLogger(__name__)

# Workers still running after their executor shut down. They are unparented
# so that deleting the executor or the application does not destroy a
# running thread.
_detached_workers: set["CallWorker"] = set()


def detached_worker_count() -> int:
    """Number of detached workers that have not finished yet."""
    return sum(1 for worker in _detached_workers if not worker.isFinished())


def wait_for_detached_workers() -> None:
    """Block until every detached worker has returned, then release them."""
    while _detached_workers:
        worker = _detached_workers.pop()
        worker.wait()


atexit.register(wait_for_detached_workers)


class Executor(Protocol):
    """Runs a blocking call off the GUI thread and reports back on it."""

    def submit(
        self,
        fn: Callable[..., Any],
        args: tuple,
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None: ...


class CallWorker(QThread):
    """Worker thread running a single blocking call."""

    done = Signal(int, bool, object)  # job_id, success, result or exception

    def __init__(
        self,
        job_id: int,
        fn: Callable[..., Any],
        args: tuple,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._job_id = job_id
        self._fn = fn
        self._args = args

    def run(self) -> None:
        """Run the call in the background thread."""
        try:
            result = self._fn(*self._args)
        except Exception as e:
            self.done.emit(self._job_id, False, e)
            return
        self.done.emit(self._job_id, True, result)


class ThreadExecutor(QObject):
    """Executor starting one worker thread per call.

    Outcomes are delivered through a queued signal, so callbacks always run
    on the thread that owns the executor.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._jobs: dict[int, tuple[CallWorker, Callable, Callable]] = {}
        self._next_job_id = 1

    @property
    def pending(self) -> int:
        """Number of calls that have not reported back yet."""
        return len(self._jobs)

    def submit(
        self,
        fn: Callable[..., Any],
        args: tuple,
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        """Start fn(*args) on a worker thread."""
        job_id = self._next_job_id
        self._next_job_id += 1

        worker = CallWorker(job_id, fn, args, parent=self)
        worker.done.connect(self._on_worker_done)
        worker.finished.connect(self._on_worker_finished)

        self._jobs[job_id] = (worker, on_success, on_failure)
        logger.debug(f"Starting job {job_id}: {getattr(fn, '__qualname__', fn)}")
        worker.start()

    @safe_slot
    def _on_worker_done(self, job_id: int, success: bool, payload: object) -> None:
        """Dispatch a finished call to its callback."""
        entry = self._jobs.pop(job_id, None)
        if entry is None:
            return

        _, on_success, on_failure = entry
        if success:
            on_success(payload)
        else:
            on_failure(payload)

    @safe_slot
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        # Detached workers are released by wait_for_detached_workers().
        if isinstance(worker, CallWorker) and worker not in _detached_workers:
            worker.deleteLater()

    def shutdown(self, wait_ms: int = 5000) -> bool:
        """Interrupt running workers, wait for them and drop their callbacks.

        Workers still running after wait_ms are detached from the executor
        and joined by wait_for_detached_workers(), at the latest on exit.
        Returns True if every worker finished in time.
        """
        jobs = list(self._jobs.values())
        self._jobs.clear()
        for worker, _, _ in jobs:
            worker.requestInterruption()

        all_finished = True
        for worker, _, _ in jobs:
            if worker.wait(wait_ms):
                continue
            logger.warning("Worker thread did not finish before shutdown, detaching it")
            all_finished = False
            worker.setParent(None)
            _detached_workers.add(worker)
        return all_finished
