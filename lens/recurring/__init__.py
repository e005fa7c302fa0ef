"""Recurring task runner: one callback, one interval, one timer."""

from lens.recurring.errors import InvalidArgumentError
from lens.recurring.lifecycle import exit_on_sigterm, register_exit_hook, unregister_exit_hook
from lens.recurring.runner import RecurringRunner

__all__ = [
    "InvalidArgumentError",
    "RecurringRunner",
    "exit_on_sigterm",
    "register_exit_hook",
    "unregister_exit_hook",
]
