# src/asyncvoid/gui/controllers/__init__.py
"""Controllers coordinate events <-> detached operations and client state."""

from asyncvoid.gui.controllers.refresh_controller import LastError, RefreshController

__all__ = [
    "LastError",
    "RefreshController",
]
