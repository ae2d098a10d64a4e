"""Completion scheduling module."""

from .scheduler import (
    CompletionTimer,
    DelayScheduler,
    ICompletionScheduler,
    ManualScheduler,
    TimerCallback,
)

__all__ = [
    "CompletionTimer",
    "DelayScheduler",
    "ICompletionScheduler",
    "ManualScheduler",
    "TimerCallback",
]
