# src/asyncvoid/gui/app_config.py
"""
App-wide config persistence for asyncvoid (platformdirs + JSON).

Persisted items (schema v1):
- refresh_interval_s: float     (home page timer period)
- fetch_failure_rate: float     (probability that a forecast fetch fails)
- fetch_latency_s: float        (simulated forecast fetch latency)
- country_load_delay_s: float   (delay before the country load populates)

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Optional "create_if_missing" flag to write defaults on first run

Design:
- AppConfigData dataclass holds JSON-friendly data (dot access)
- AppConfig manager provides explicit API for load/save and validated updates
- Field metadata carries min/max limits
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from asyncvoid.core.utils.logging import get_logger
from asyncvoid.gui.config import APP_NAME, DEFAULT_REFRESH_INTERVAL_S

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

# Defaults
DEFAULT_FETCH_FAILURE_RATE: float = 0.3
DEFAULT_FETCH_LATENCY_S: float = 0.25
DEFAULT_COUNTRY_LOAD_DELAY_S: float = 1.0


@dataclass
class AppConfigData:
    """
    JSON-serializable config payload.

    Keep fields JSON-friendly; field metadata carries the validation limits.
    """

    schema_version: int = SCHEMA_VERSION

    refresh_interval_s: float = field(
        default=DEFAULT_REFRESH_INTERVAL_S,
        metadata={"label": "Refresh interval (s)", "min": 0.1, "max": 60.0},
    )

    fetch_failure_rate: float = field(
        default=DEFAULT_FETCH_FAILURE_RATE,
        metadata={"label": "Fetch failure rate", "min": 0.0, "max": 1.0},
    )

    fetch_latency_s: float = field(
        default=DEFAULT_FETCH_LATENCY_S,
        metadata={"label": "Fetch latency (s)", "min": 0.0, "max": 10.0},
    )

    country_load_delay_s: float = field(
        default=DEFAULT_COUNTRY_LOAD_DELAY_S,
        metadata={"label": "Country load delay (s)", "min": 0.0, "max": 10.0},
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "AppConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - falls back to defaults for missing, non-numeric or out-of-range values
        """
        schema_version = int(d.get("schema_version", -1))
        defaults = cls()
        values: Dict[str, float] = {}
        for f in fields(cls):
            if f.name == "schema_version":
                continue
            default = getattr(defaults, f.name)
            raw = d.get(f.name, default)
            values[f.name] = _coerce_float(f.name, raw, default, f.metadata)
        return cls(schema_version=schema_version, **values)


def _coerce_float(name: str, raw: Any, default: float, metadata: Any) -> float:
    if isinstance(raw, bool):
        logger.warning(f"Invalid {name} {raw!r}, using default {default}")
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {name} {raw!r}, using default {default}")
        return default
    min_val = metadata.get("min")
    max_val = metadata.get("max")
    if (min_val is not None and value < min_val) or (max_val is not None and value > max_val):
        logger.warning(f"Out of range {name} {value}, using default {default}")
        return default
    return value


class AppConfig:
    """
    Manager for loading/saving AppConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[AppConfigData] = None):
        self.path = path
        self.data = data if data is not None else AppConfigData()

    # -----------------------------
    # Construction / persistence
    # -----------------------------
    @staticmethod
    def default_config_path(
        app_name: str = APP_NAME,
        filename: str = "app_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/asyncvoid/app_config.json
        Linux:   ~/.config/asyncvoid/app_config.json
        Windows: %APPDATA%\\asyncvoid\\app_config.json
        """
        d = Path(user_config_dir(app_name, app_author))
        d.mkdir(parents=True, exist_ok=True)
        return d / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = APP_NAME,
        filename: str = "app_config.json",
        app_author: str | None = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
    ) -> "AppConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename, app_author=app_author)
        default_data = AppConfigData(schema_version=schema_version)

        try:
            raw = path.read_text(encoding="utf-8")
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                logger.warning(f"App config file at {path} does not contain a dict, using defaults")
                return cls(path=path, data=default_data)

            loaded = AppConfigData.from_json_dict(parsed)

            if int(loaded.schema_version) != int(schema_version):
                if reset_on_version_mismatch:
                    logger.warning(
                        f"App config schema version mismatch: loaded={loaded.schema_version}, "
                        f"expected={schema_version}, resetting to defaults"
                    )
                    return cls(path=path, data=default_data)
                loaded.schema_version = int(schema_version)

            return cls(path=path, data=loaded)

        except FileNotFoundError:
            logger.info(f"App config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except Exception as e:
            logger.error(f"Failed to load app config from {path}: {e}", exc_info=True)
            logger.info("Using default app config")
            return cls(path=path, data=default_data)

    def save(self) -> None:
        """Write config to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = self.data.to_json_dict()
        logger.info(f"saving app_config to {self.path}")
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # -----------------------------
    # Public API: attribute access
    # -----------------------------
    def get_attribute(self, key: str) -> Any:
        """
        Get attribute value by key.

        Raises:
            AttributeError: If key doesn't exist
        """
        if not hasattr(self.data, key):
            raise AttributeError(f"AppConfigData has no attribute '{key}'")
        return getattr(self.data, key)

    def set_attribute(self, key: str, value: Any) -> None:
        """
        Set attribute value by key with validation.

        Raises:
            AttributeError: If key doesn't exist
            ValueError: If value is not a number or outside the field's min/max
        """
        if key == "schema_version" or not hasattr(self.data, key):
            raise AttributeError(f"AppConfigData has no attribute '{key}'")

        metadata = self.get_field_metadata(key)
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid value type for '{key}': {e}")

        min_val = metadata.get("min")
        max_val = metadata.get("max")
        if min_val is not None and value < min_val:
            raise ValueError(f"Value '{value}' is less than minimum '{min_val}'")
        if max_val is not None and value > max_val:
            raise ValueError(f"Value '{value}' is greater than maximum '{max_val}'")

        setattr(self.data, key, value)
        logger.debug(f"Set app_config.{key} = {value}")

    def get_field_metadata(self, key: str) -> Dict[str, Any]:
        """Return the metadata dict (label, min, max) of a field."""
        for f in fields(self.data):
            if f.name == key:
                return dict(f.metadata)
        raise AttributeError(f"AppConfigData has no attribute '{key}'")
