"""Layered config: optional YAML/JSON file over env, runtime overrides over both."""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

logger = logging.getLogger(__name__)

CONFIG_SUFFIXES = (".yaml", ".yml", ".json")


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a flat mapping from a YAML or JSON file. Missing or unreadable files yield {}."""
    if not path.exists():
        logger.debug("Config file not found: %s (using env/defaults)", path)
        return {}
    if path.suffix.lower() not in CONFIG_SUFFIXES:
        logger.warning("Config file must be .yaml, .yml, or .json: %s", path)
        return {}
    try:
        raw = path.read_text()
    except OSError as e:
        logger.warning("Could not read config file %s: %s", path, e)
        return {}
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file must contain a mapping; got %s", type(data).__name__)
        return {}
    return data


class ConfigStore:
    """
    Builds Settings from env, an optional config file and pushed overrides.
    Precedence: overrides > config file > env > defaults.
    """

    def __init__(self, settings_cls: type, config_file_path: Optional[str] = None):
        self._settings_cls = settings_cls
        self._file_path: Optional[Path] = None
        if config_file_path:
            self._file_path = Path(config_file_path).expanduser().resolve()
        self._overrides: dict[str, Any] = {}
        self._current: Optional[Any] = None
        self._lock = threading.RLock()

    @property
    def file_path(self) -> Optional[Path]:
        return self._file_path

    def _build(self, overrides: dict[str, Any]) -> Any:
        env_values = self._settings_cls().model_dump()
        file_values = read_config_file(self._file_path) if self._file_path else {}
        return self._settings_cls(**{**env_values, **file_values, **overrides})

    def load_initial(self) -> None:
        """Build the first Settings snapshot. Invalid values raise at startup."""
        with self._lock:
            self._current = self._build(self._overrides)
            if self._file_path and self._file_path.exists():
                logger.info("Loaded config file: %s", self._file_path)

    def get_settings(self) -> Any:
        """Current Settings snapshot, loading on first use."""
        with self._lock:
            if self._current is None:
                self.load_initial()
            return self._current

    def update(self, overrides: dict[str, Any]) -> bool:
        """Apply overrides. On validation failure the previous snapshot is kept and False returned."""
        with self._lock:
            merged = {**self._overrides, **overrides}
            try:
                self._current = self._build(merged)
            except ValidationError as e:
                logger.warning("Config update rejected; keeping previous config: %s", e)
                return False
            self._overrides = merged
            return True

    def reload_from_file(self) -> bool:
        """Re-read the config file, keeping pushed overrides."""
        with self._lock:
            try:
                self._current = self._build(self._overrides)
            except ValidationError as e:
                logger.warning("Config reload rejected; keeping previous config: %s", e)
                return False
            return True

    def clear_overrides(self) -> None:
        """Drop pushed overrides and rebuild from file and env."""
        with self._lock:
            self._overrides.clear()
            self._current = self._build({})
