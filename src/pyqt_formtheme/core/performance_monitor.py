"""Performance monitoring utilities for pyqt-formtheme.

Provides decorators and context managers for timing theme compilation and
property application. Output goes to a dedicated performance logger; file
and console handlers are attached only when
``configure_performance_logging()`` is called.
"""

import time
import functools
import logging
from contextlib import contextmanager
from typing import Optional, Callable
from pathlib import Path

from pyqt_formtheme.protocols.theme_config import get_theme_config

perf_logger = logging.getLogger(get_theme_config().performance_logger_name)

_configured = False


def configure_performance_logging(log_dir: Optional[str] = None, console: bool = False) -> Path:
    """Attach a file handler (and optionally a console handler) to the performance logger.

    Args:
        log_dir: Directory for the performance log (defaults to the configured log_dir)
        console: Whether to also echo timings to the console

    Returns:
        Path of the performance log file
    """
    global _configured
    config = get_theme_config()
    directory = Path(log_dir or config.log_dir or Path.home() / '.local' / 'share' / 'pyqt_formtheme' / 'logs')
    log_file = directory / config.performance_log_filename
    if _configured:
        return log_file

    log_file.parent.mkdir(parents=True, exist_ok=True)
    perf_logger.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    perf_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter('⏱️  %(message)s'))
        perf_logger.addHandler(console_handler)

    _configured = True
    return log_file


@contextmanager
def timer(operation_name: str, threshold_ms: float = 0.0, log_args: bool = False, **kwargs):
    """Context manager for timing operations.

    Args:
        operation_name: Name of the operation being timed
        threshold_ms: Only log if operation takes longer than this (in milliseconds)
        log_args: Whether to log kwargs in the message
        **kwargs: Additional context to include in log message

    Example:
        with timer("Apply properties", threshold_ms=16.0, count=len(props)):
            surface.apply(props)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000

        if elapsed_ms >= threshold_ms:
            msg = f"{operation_name}: {elapsed_ms:.2f}ms"
            if log_args and kwargs:
                args_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
                msg += f" ({args_str})"

            perf_logger.debug(msg)


def timed(operation_name: Optional[str] = None, threshold_ms: float = 0.0):
    """Decorator for timing function calls.

    Args:
        operation_name: Name for the operation (defaults to function name)
        threshold_ms: Only log if operation takes longer than this (in milliseconds)
    """
    def decorator(func: Callable) -> Callable:
        name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                if elapsed_ms >= threshold_ms:
                    perf_logger.debug(f"{name}: {elapsed_ms:.2f}ms")

        return wrapper
    return decorator


class PerformanceMonitor:
    """Accumulates timing statistics for repeated operations.

    Example:
        monitor = PerformanceMonitor("Theme compilation")

        for theme in themes:
            with monitor.measure():
                compile_properties(theme)

        monitor.report()  # Logs summary statistics
    """

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.timings = []

    @contextmanager
    def measure(self):
        """Measure a single operation."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.timings.append(elapsed_ms)

    @property
    def count(self) -> int:
        return len(self.timings)

    @property
    def average_ms(self) -> float:
        return sum(self.timings) / len(self.timings) if self.timings else 0.0

    def report(self):
        """Log summary statistics."""
        if not self.timings:
            perf_logger.debug(f"{self.operation_name}: No measurements")
            return

        perf_logger.debug(
            f"{self.operation_name} - "
            f"Count: {self.count}, "
            f"Total: {sum(self.timings):.2f}ms, "
            f"Avg: {self.average_ms:.2f}ms, "
            f"Min: {min(self.timings):.2f}ms, "
            f"Max: {max(self.timings):.2f}ms"
        )

    def reset(self):
        """Clear all timings."""
        self.timings.clear()
