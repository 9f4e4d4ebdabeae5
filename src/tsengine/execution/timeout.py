"""Deadline and cancellation enforcement for blocking collaborator calls.

Store calls are synchronous and may block on I/O. The orchestrator runs each
one through :func:`run_with_timeout`, which waits for the result no longer
than the effective deadline and gives up early when the caller's cancel flag
is set.

Architecture:
    ::

        ┌────────────────────────────────────────────────────────────────┐
        │ with deadline_context(5.0):            # caller-wide budget     │
        │     run_with_timeout(store.get, 10.0,  # per-call budget        │
        │                      args=(sid,), cancel=event)                 │
        │ # effective timeout = min(10.0, remaining outer budget)         │
        └────────────────────────────────────────────────────────────────┘
                              │
                              ▼
        ┌────────────────────────────────────────────────────────────────┐
        │          ThreadPoolExecutor(max_workers=1) + polling           │
        │  - call runs on a worker thread                                │
        │  - caller wakes every poll interval to check cancel/deadline   │
        │  - on expiry: TimeoutExpired; on cancel: OperationCancelled    │
        │  - executor is shut down without waiting for the worker        │
        └────────────────────────────────────────────────────────────────┘

Examples:
    >>> result = run_with_timeout(store.get, 5.0, operation="metadata.get", args=("US.GDP",))

    Nested deadlines (shortest wins):

    >>> with deadline_context(2.0):
    ...     run_with_timeout(slow_call, 30.0)  # limited to ~2s

Guardrails:
    - A timed-out worker thread cannot be killed; it finishes in the
      background and its result is discarded.
    - Pure CPU stages (resample/transform/fill) do not need this.

Tags:
    timeout, deadline, cancellation, resilience, tsengine
"""

from __future__ import annotations

import concurrent.futures
import threading
import time
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, TypeVar

_POLL_INTERVAL_SECONDS = 0.05


class TimeoutExpired(TimeoutError):
    """Raised when an operation exceeds its deadline.

    Attributes:
        timeout: The timeout value that was exceeded
        elapsed: How long the operation ran before being abandoned
        operation: Name/description of the operation
    """

    def __init__(
        self,
        timeout: float,
        elapsed: float | None = None,
        operation: str = "operation",
    ):
        self.timeout = timeout
        self.elapsed = elapsed
        self.operation = operation

        msg = f"Operation '{operation}' timed out after {timeout}s"
        if elapsed is not None:
            msg += f" (ran for {elapsed:.2f}s)"

        super().__init__(msg)


class OperationCancelled(Exception):
    """Raised when the caller's cancel flag is set while waiting."""

    def __init__(self, operation: str = "operation"):
        self.operation = operation
        super().__init__(f"Operation '{operation}' was cancelled")


@dataclass
class DeadlineContext:
    """Tracks an absolute deadline on the monotonic clock."""

    deadline: float
    timeout_seconds: float
    operation: str = "operation"
    start_time: float = field(default_factory=time.monotonic)

    def remaining(self) -> float:
        """Seconds until the deadline; negative once expired."""
        return self.deadline - time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def is_expired(self) -> bool:
        return time.monotonic() >= self.deadline


# Thread-local storage for nested deadlines
_deadline_stack: threading.local = threading.local()


def _get_deadline_stack() -> list[DeadlineContext]:
    if not hasattr(_deadline_stack, "stack"):
        _deadline_stack.stack = []
    return _deadline_stack.stack


def get_current_deadline() -> DeadlineContext | None:
    """Get the innermost active deadline context, if any."""
    stack = _get_deadline_stack()
    return stack[-1] if stack else None


def get_effective_timeout(requested: float) -> float:
    """Minimum of ``requested`` and the time left on the enclosing deadline."""
    current = get_current_deadline()
    if current is None:
        return requested
    return min(requested, current.remaining())


@contextmanager
def deadline_context(seconds: float, operation: str | None = None):
    """Bound every :func:`run_with_timeout` call inside the block.

    Does not interrupt code on its own; it only shortens nested timeouts.

    Example:
        >>> with deadline_context(3.0) as ctx:
        ...     orchestrator.get_data("US.GDP", ...)
    """
    if seconds <= 0:
        raise ValueError(f"Timeout must be positive, got {seconds}")

    effective = get_effective_timeout(seconds)
    now = time.monotonic()
    ctx = DeadlineContext(
        deadline=now + effective,
        timeout_seconds=effective,
        operation=operation or "operation",
        start_time=now,
    )

    stack = _get_deadline_stack()
    stack.append(ctx)
    try:
        yield ctx
    finally:
        stack.pop()


T = TypeVar("T")


def run_with_timeout(
    func: Callable[..., T],
    timeout_seconds: float,
    operation: str | None = None,
    args: tuple[Any, ...] | None = None,
    kwargs: dict[str, Any] | None = None,
    cancel: threading.Event | None = None,
) -> T:
    """Run a blocking callable, abandoning it on deadline or cancellation.

    Args:
        func: Callable to execute
        timeout_seconds: Maximum time to wait for the result
        operation: Name for error messages
        args: Positional arguments for func
        kwargs: Keyword arguments for func
        cancel: Caller-owned flag; when set, waiting stops immediately

    Returns:
        Result of ``func(*args, **kwargs)``

    Raises:
        TimeoutExpired: If the effective deadline passes first
        OperationCancelled: If ``cancel`` is set first
        Exception: Anything ``func`` raises, unchanged
    """
    if timeout_seconds <= 0:
        raise ValueError(f"Timeout must be positive, got {timeout_seconds}")

    op_name = operation or getattr(func, "__name__", "unknown")
    if cancel is not None and cancel.is_set():
        raise OperationCancelled(op_name)

    effective = get_effective_timeout(timeout_seconds)
    start = time.monotonic()
    if effective <= 0:
        raise TimeoutExpired(timeout=timeout_seconds, elapsed=0.0, operation=op_name)

    deadline = start + effective
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="tsengine-upstream")
    try:
        future = executor.submit(func, *(args or ()), **(kwargs or {}))
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                future.cancel()
                raise TimeoutExpired(
                    timeout=effective,
                    elapsed=time.monotonic() - start,
                    operation=op_name,
                )
            wait_for = remaining if cancel is None else min(remaining, _POLL_INTERVAL_SECONDS)
            done, _ = concurrent.futures.wait([future], timeout=wait_for)
            if done:
                return future.result()
            if cancel is not None and cancel.is_set():
                future.cancel()
                raise OperationCancelled(op_name)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "TimeoutExpired",
    "OperationCancelled",
    "DeadlineContext",
    "get_current_deadline",
    "get_effective_timeout",
    "deadline_context",
    "run_with_timeout",
]
