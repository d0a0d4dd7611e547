"""asyncvoid: observing detached asyncio operations in a NiceGUI app."""

__version__ = "0.1.0"
