# evenstream/utils/logging.py
"""
Logging utilities: a timer with optional memory tracking, and progress messages.

Output is plain ``print``; the placement loop and the standalone distance
routine only report when their ``verbose`` flag is set.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, Protocol
import time

import psutil


class ProgressCallback(Protocol):
    """Called as ``callback(step, total, **extra)`` while lines are processed."""
    def __call__(self, step: int, total: int, **kwargs: Any) -> None:
        ...


def memory_info() -> Dict[str, Any]:
    """
    Get current process memory usage.

    Returns
    -------
    dict
        Keys 'rss_mb', 'vms_mb', 'available_mb', 'percent_used'
    """
    mem = psutil.Process().memory_info()
    vm = psutil.virtual_memory()
    mb = 1024.0 * 1024.0
    return {
        "rss_mb": mem.rss / mb,
        "vms_mb": mem.vms / mb,
        "available_mb": vm.available / mb,
        "percent_used": vm.percent,
    }


class Timer:
    """
    Wall-clock timer, usable as a context manager.

    Parameters
    ----------
    name : str
        Label printed in the report
    track_memory : bool
        Also record the change in resident memory
    report : bool
        Print the report when the ``with`` block exits
    """

    def __init__(self, name: str = "Timer", track_memory: bool = False, report: bool = True):
        self.name = name
        self.track_memory = track_memory
        self.report_on_exit = report
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self._rss_start: Optional[float] = None
        self._rss_end: Optional[float] = None

    def start(self) -> None:
        self.end_time = None
        self._rss_end = None
        if self.track_memory:
            self._rss_start = memory_info()["rss_mb"]
        self.start_time = time.perf_counter()

    def stop(self) -> float:
        """Stop the timer and return the elapsed seconds."""
        if self.start_time is None:
            raise RuntimeError("Timer not started")
        self.end_time = time.perf_counter()
        if self.track_memory:
            self._rss_end = memory_info()["rss_mb"]
        return self.elapsed

    @property
    def elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        stop = time.perf_counter() if self.end_time is None else self.end_time
        return stop - self.start_time

    @property
    def memory_delta(self) -> Optional[Dict[str, float]]:
        """RSS change in MB as ``{'rss_mb': ...}``, once stopped with tracking on."""
        if self._rss_start is None or self._rss_end is None:
            return None
        return {"rss_mb": self._rss_end - self._rss_start}

    def report(self) -> None:
        msg = f"{self.name}: {self.elapsed:.6f}s"
        delta = self.memory_delta
        if delta is not None:
            msg += f" ({delta['rss_mb']:+.1f} MB RSS)"
        print(msg)

    def __enter__(self) -> 'Timer':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
        if self.report_on_exit:
            self.report()


def create_progress_callback(
    name: str = "Progress",
    update_every: int = 1,
    show_rate: bool = False,
) -> ProgressCallback:
    """
    Build a callback printing ``"<name>: line <step> of <total>"``.

    Parameters
    ----------
    name : str
        Message prefix, usually the calling module's ``__name__``
    update_every : int
        Print every N steps; the last step always prints
    show_rate : bool
        Append lines per second since the callback was created

    Returns
    -------
    ProgressCallback
    """
    t0 = time.perf_counter()
    every = max(int(update_every), 1)

    def callback(step: int, total: int, **kwargs: Any) -> None:
        if step != total and step % every:
            return
        parts = [f"{name}: line {step} of {total}"]
        if show_rate:
            dt = time.perf_counter() - t0
            if dt > 0:
                parts.append(f"{step / dt:.1f} lines/s")
        parts.extend(f"{k}={v}" for k, v in kwargs.items())
        print(", ".join(parts), flush=True)

    return callback
