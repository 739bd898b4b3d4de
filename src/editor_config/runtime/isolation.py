"""Run one evaluation on its own worker thread.

Each call gets a dedicated thread with a large stack, so deep recursion in a
script is stopped by the interpreter's stack limit rather than by the
process. The caller blocks until the worker finishes.
"""

import itertools
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from returns.result import Failure, Result, Success

from ..core import (
    EditorConfigError,
    ScriptTimeoutError,
    Settings,
    ThreadPanicError,
    ThreadSpawnError,
    get_logger,
    get_settings,
)

logger = get_logger(__name__)

T = TypeVar("T")

# threading.stack_size() is process-wide; serialize set/start/restore.
_spawn_lock = threading.Lock()
_worker_ids = itertools.count(1)


def _start_with_stack(thread: threading.Thread, stack_size: int) -> None:
    with _spawn_lock:
        previous = threading.stack_size(stack_size)
        try:
            thread.start()
        finally:
            threading.stack_size(previous)


def run_isolated(fn: Callable[[], T], settings: Settings | None = None) -> Result[T, EditorConfigError]:
    """
    Run ``fn`` on a fresh worker thread and wait for it.

    Args:
        fn: Work to run; builds its own sandbox and returns the result
        settings: Runtime settings (defaults to environment settings)

    Returns:
        Success with the return value, or Failure with the error. An
        ``EditorConfigError`` raised by ``fn`` is passed through; any other
        exception becomes a ``ThreadPanicError``.
    """
    settings = settings or get_settings()
    outcome: dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = fn()
        except EditorConfigError as e:
            outcome["error"] = e
        except Exception as e:
            logger.error("worker_panicked", error=str(e), exc_info=True)
            outcome["error"] = ThreadPanicError(f"Thread panicked: {e}", stage="join", original=e)

    name = f"{settings.thread_name_prefix}-{next(_worker_ids)}"
    thread = threading.Thread(target=target, name=name, daemon=True)

    try:
        _start_with_stack(thread, settings.worker_stack_size)
    except (RuntimeError, ValueError) as e:
        logger.error("worker_spawn_failed", error=str(e))
        return Failure(ThreadSpawnError(f"Failed to spawn thread: {e}", stage="spawn", original=e))

    thread.join(settings.join_timeout)
    if thread.is_alive():
        # No way to interrupt the interpreter; the daemon thread is abandoned.
        logger.warning("worker_timed_out", thread=name, timeout=settings.join_timeout)
        return Failure(
            ScriptTimeoutError(f"Script did not finish within {settings.join_timeout}s", stage="join")
        )

    if "error" in outcome:
        return Failure(outcome["error"])
    if "value" not in outcome:
        return Failure(ThreadPanicError("Thread panicked: worker exited without a result", stage="join"))
    return Success(outcome["value"])
