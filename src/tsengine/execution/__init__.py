"""Execution control for blocking collaborator calls (deadlines, cancellation)."""

from tsengine.execution.timeout import (
    DeadlineContext,
    OperationCancelled,
    TimeoutExpired,
    deadline_context,
    get_current_deadline,
    get_effective_timeout,
    run_with_timeout,
)

__all__ = [
    "DeadlineContext",
    "OperationCancelled",
    "TimeoutExpired",
    "deadline_context",
    "get_current_deadline",
    "get_effective_timeout",
    "run_with_timeout",
]
