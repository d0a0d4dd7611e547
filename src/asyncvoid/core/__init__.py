"""UI-independent core: detached-operation wrapper, dispatch and data services."""

from asyncvoid import __version__
from asyncvoid.core.detached import attach, fire_and_forget, running_count
from asyncvoid.core.dispatch import UiDispatcher

__all__ = [
    "__version__",
    "attach",
    "fire_and_forget",
    "running_count",
    "UiDispatcher",
]
