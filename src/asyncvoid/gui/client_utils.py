"""Utilities for checking client validity and handling client lifecycle."""

from __future__ import annotations

from typing import Callable

from nicegui import ui

from asyncvoid.core.utils.logging import get_logger

logger = get_logger(__name__)


def is_client_alive() -> bool:
    """Check if the current NiceGUI client context is still alive."""
    try:
        _ = ui.context.client.id
        return True
    except (AttributeError, RuntimeError):
        return False


def safe_call(func: Callable, *args, **kwargs) -> None:
    """Call a UI update function, ignoring "client deleted" errors.

    Detached operations may finish after their client has gone away; updating
    its elements then raises RuntimeError. Other RuntimeErrors are re-raised.
    """
    try:
        func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            logger.error(f"safe_call caught RuntimeError in {getattr(func, '__name__', func)}: {e}")
            raise
        logger.debug(f"ignoring update of deleted client in {getattr(func, '__name__', func)}")
