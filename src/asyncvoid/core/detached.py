"""Observe the terminal outcome of detached ("fire-and-forget") asyncio operations.

A detached operation is started by something that cannot await it: a timer
tick, an object constructor, a button handler that returns before the work is
done. If such an operation raises, nobody is positioned to receive the error.

`attach()` wraps the operation in an observer task that awaits it and routes
the outcome to exactly one of two callbacks:

    handle = attach(service.load(), on_success=log_ok, on_failure=log_error)

The observer is scheduled before the operation does any work (coroutines only
start running when the observer awaits them, thunks are called inside the
observer), so an error can never be raised before the callbacks are in place.

`fire_and_forget()` is the unobserved counterpart: its failures go to the event
loop's global exception handler.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Set, Union

from asyncvoid.core.utils.logging import get_logger

logger = get_logger(__name__)

Operation = Union[Awaitable[Any], Callable[[], Awaitable[Any]]]
OnSuccess = Callable[[], Any]
OnFailure = Callable[[Exception], Any]

# Strong references to in-flight tasks; the event loop only keeps weak ones.
_RUNNING: Set["asyncio.Task[Any]"] = set()


def attach(
    operation: Operation,
    on_success: Optional[OnSuccess] = None,
    on_failure: Optional[OnFailure] = None,
    *,
    name: Optional[str] = None,
) -> "asyncio.Task[None]":
    """Start observing a detached operation and return its handle.

    Returns immediately. The returned task settles after the operation has
    settled and the matching callback has run. Awaiting it never raises the
    operation's error.

    Args:
        operation: Awaitable already in flight (coroutine, Task, Future) or a
            zero-argument callable returning one.
        on_success: Called with no arguments when the operation completes.
        on_failure: Called with the exception when the operation fails. If
            omitted the failure is logged at ERROR and swallowed.
        name: Optional task name used in log messages.

    Raises:
        TypeError: ``operation`` is neither awaitable nor callable.
        RuntimeError: No event loop is running in the calling thread.
    """
    if not (inspect.isawaitable(operation) or callable(operation)):
        raise TypeError(
            f"attach() expects an awaitable or a callable returning one, got {type(operation).__name__}"
        )

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        if inspect.iscoroutine(operation):
            operation.close()
        raise RuntimeError("attach() must be called from a running event loop") from None

    label = name or _describe(operation)
    task = loop.create_task(_observe(operation, on_success, on_failure, label), name=label)
    _track(task)
    return task


def fire_and_forget(operation: Operation, *, name: Optional[str] = None) -> "asyncio.Task[Any]":
    """Start an operation with no continuation attached.

    A failure is handed to the event loop's exception handler, i.e. the
    hosting runtime's global error path. Prefer `attach()`.
    """
    awaitable = operation if inspect.isawaitable(operation) else operation()
    task = asyncio.ensure_future(awaitable)
    if name is not None and isinstance(task, asyncio.Task):
        task.set_name(name)
    task.add_done_callback(_escalate_unobserved)
    _track(task)
    return task


def running_count() -> int:
    """Number of detached tasks that have not settled yet."""
    return len(_RUNNING)


def _track(task: "asyncio.Task[Any]") -> None:
    _RUNNING.add(task)
    task.add_done_callback(_RUNNING.discard)


async def _observe(
    operation: Operation,
    on_success: Optional[OnSuccess],
    on_failure: Optional[OnFailure],
    label: str,
) -> None:
    try:
        awaitable = operation if inspect.isawaitable(operation) else operation()
        await awaitable
    except asyncio.CancelledError:
        logger.debug(f"detached operation {label!r} was cancelled")
        raise
    except Exception as exc:
        if on_failure is None:
            logger.error(
                f"detached operation {label!r} failed and has no failure handler: {exc}",
                exc_info=exc,
            )
            return
        await _invoke(on_failure, label, exc)
        return

    if on_success is not None:
        await _invoke(on_success, label)


async def _invoke(callback: Callable[..., Any], label: str, *args: Any) -> None:
    try:
        result = callback(*args)
        if inspect.isawaitable(result):
            await result
    except asyncio.CancelledError:
        raise
    except Exception:
        name = getattr(callback, "__qualname__", repr(callback))
        logger.exception(f"outcome callback {name} for detached operation {label!r} raised")


def _escalate_unobserved(task: "asyncio.Future[Any]") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is None:
        return
    task.get_loop().call_exception_handler(
        {
            "message": "Unobserved exception in fire-and-forget task",
            "exception": exc,
            "future": task,
        }
    )


def _describe(operation: Operation) -> str:
    if inspect.iscoroutine(operation):
        return getattr(operation, "__qualname__", None) or operation.__class__.__name__
    if isinstance(operation, asyncio.Task):
        return operation.get_name()
    return getattr(operation, "__qualname__", None) or type(operation).__name__
