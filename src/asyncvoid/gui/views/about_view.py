"""About view: version information and the tail of the application log.

Failures of eager loads are only reported to the log, so this is where a
user can see them.
"""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Optional

from nicegui import ui

from asyncvoid.core.utils.about import getVersionInfo
from asyncvoid.core.utils.logging import get_log_file_path, get_logger

logger = get_logger(__name__)


def read_log_tail(log_path: Optional[Path], max_lines: int) -> str:
    """Return the last ``max_lines`` lines of the log, or a placeholder."""
    if not log_path or not log_path.exists():
        return "[empty]"
    try:
        with log_path.open("r", encoding="utf-8", errors="replace") as f:
            tail_lines = deque(f, maxlen=max_lines)
    except OSError as e:
        return f"Unable to read log file: {e}"
    log_content = "".join(tail_lines)
    if len(tail_lines) == max_lines:
        log_content = f"...(truncated, last {max_lines} lines)...\n{log_content}"
    return log_content


class AboutView:
    """Version info + logs."""

    def __init__(self, *, max_log_lines: int = 300) -> None:
        self._max_log_lines = max_log_lines

    def render(self) -> None:
        version_info = getVersionInfo()

        with ui.card().classes("w-full p-4 gap-2"):
            ui.label("Version info").classes("text-lg font-semibold")
            for key, value in version_info.items():
                with ui.row().classes("items-center gap-2"):
                    ui.label(f"{key}:").classes("text-sm text-gray-500")
                    ui.label(str(value)).classes("text-sm")

        log_path = get_log_file_path()
        log_content = read_log_tail(log_path, self._max_log_lines)

        with ui.expansion("Logs", value=True).classes("w-full"):
            ui.label(f"Log file: {log_path or 'N/A'}").classes("text-sm text-gray-500")
            ui.code(log_content).classes("w-full text-sm").style(
                "white-space: pre-wrap; font-family: monospace; max-height: 400px; overflow: auto;"
            )
