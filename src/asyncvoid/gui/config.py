from __future__ import annotations

APP_NAME = "asyncvoid"
DEFAULT_PORT = 8080
STORAGE_SECRET = "asyncvoid-session-secret"  # Secret key for browser session storage

# Developer-level runtime configuration
DEFAULT_REFRESH_INTERVAL_S: float = 2.0  # Timer period of the home page refresh
ERROR_TIME_FORMAT: str = "%H:%M:%S"  # Timestamp format of the "{message} at {time}" error text
