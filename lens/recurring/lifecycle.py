"""Process-exit notifications: run teardown hooks before the interpreter exits.

Hooks run on normal interpreter shutdown through ``atexit``.  Python does not
run them on SIGTERM by default; call :func:`exit_on_sigterm` from the main
thread to turn SIGTERM into a regular ``SystemExit``.
"""

from __future__ import annotations

import atexit
import logging
import signal
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def register_exit_hook(callback: Callable[[], Any]) -> None:
    """Run *callback* when the process exits."""
    atexit.register(callback)
    logger.debug("Registered exit hook: %r", callback)


def unregister_exit_hook(callback: Callable[[], Any]) -> None:
    """Remove a hook added by :func:`register_exit_hook`. Unknown hooks are ignored."""
    atexit.unregister(callback)
    logger.debug("Unregistered exit hook: %r", callback)


def _raise_system_exit(signum: int, frame: Any) -> None:
    logger.info("Received signal %d, exiting", signum)
    raise SystemExit(128 + signum)


def exit_on_sigterm():
    """Make SIGTERM exit the interpreter normally so exit hooks run.

    Returns the previous handler, or None when not on the main thread
    (signal handlers can only be installed there).
    """
    if threading.current_thread() is not threading.main_thread():
        logger.debug("Not on the main thread, SIGTERM handler not installed")
        return None
    previous = signal.signal(signal.SIGTERM, _raise_system_exit)
    logger.debug("SIGTERM handler installed")
    return previous
