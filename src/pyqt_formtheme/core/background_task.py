"""Background task running a callable on a QThread and reporting back via signals."""

from typing import Callable, Any, Optional, Tuple
from PyQt6.QtCore import QObject, QThread, pyqtSignal
import logging

logger = logging.getLogger(__name__)

# --- Module-level constants ---
CLEANUP_WAIT_MS = 2000    # Wait time per task during teardown


class BackgroundTask(QThread):
    """
    Background task with result/error signals.

    Signals are emitted from the worker thread; connections made on the main
    thread are delivered there through queued connections, so handlers run
    on the main thread in event-loop order.

    Usage:
        task = BackgroundTask(target=loader.load, args=(font_ref,))
        task.result_ready.connect(on_success)
        task.error_occurred.connect(on_error)  # Receives Exception, not str
        task.start()

    There is no cancellation: once started, a task always reports exactly
    one of result_ready or error_occurred.
    """

    result_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(Exception)  # Full exception, caller decides

    def __init__(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: Optional[dict] = None,
        parent=None
    ):
        super().__init__(parent)
        self._target = target
        self._args = args
        self._kwargs = kwargs or {}

    def run(self):
        """Execute target in background."""
        try:
            result = self._target(*self._args, **self._kwargs)
        except Exception as e:
            self.error_occurred.emit(e)  # Full exception object
        else:
            self.result_ready.emit(result)


class BackgroundTaskPool(QObject):
    """
    Keeps concurrently running BackgroundTasks alive until they finish.

    QThread objects must outlive their thread, so every started task is
    held here and released once its ``finished`` signal reaches the main
    thread. Callbacks should be bound methods of QObjects living on the
    main thread so that results are delivered there.

    Usage:
        self._tasks = BackgroundTaskPool(parent=self)

        self._tasks.run(target=fetch, args=(x,), on_success=self._on_done, on_error=self._on_failed)

        def close(self):
            self._tasks.cleanup()
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._tasks = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def run(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: Optional[dict] = None,
        on_success: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> BackgroundTask:
        """
        Start a background task.

        Args:
            target: Function to execute in background
            args: Positional arguments for target
            kwargs: Keyword arguments for target
            on_success: Callback for successful result
            on_error: Callback for error (receives Exception, not str)

        Returns:
            The started BackgroundTask
        """
        task = BackgroundTask(target=target, args=args, kwargs=kwargs)
        if on_success:
            task.result_ready.connect(on_success)
        if on_error:
            task.error_occurred.connect(on_error)
        task.finished.connect(self._release_finished)

        self._tasks.add(task)
        task.start()
        return task

    def _release_finished(self) -> None:
        for task in [t for t in self._tasks if t.isFinished()]:
            task.wait()
            self._tasks.discard(task)

    def cleanup(self):
        """Wait for every running task. Call at teardown."""
        for task in list(self._tasks):
            if not task.wait(CLEANUP_WAIT_MS):
                logger.warning("Background task still running after cleanup wait")
        self._tasks.clear()
