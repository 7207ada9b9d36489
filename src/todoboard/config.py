"""Configuration: JSON file under the config dir, TODOBOARD_* env overrides."""

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger("todoboard.config")

_config_cache: "Config | None" = None

PER_PAGE_OPTIONS = (10, 25, 50, 100)
ENV_PREFIX = "TODOBOARD_"


class ConfigError(ValueError):
    """A setting name or value was rejected."""


def clear_config_cache() -> None:
    """Drop the cached default Config so the next load re-reads disk and env."""
    global _config_cache
    _config_cache = None


def get_default_config_dir() -> Path:
    """TODOBOARD_CONFIG_DIR if set, else ~/.config/todoboard."""
    config_dir = os.environ.get(ENV_PREFIX + "CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path.home() / ".config" / "todoboard"


def _choices(key: str) -> tuple | None:
    """Allowed values for a setting, or None when any value of the right type goes."""
    if key == "items_per_page":
        return PER_PAGE_OPTIONS
    if key == "default_view":
        from todoboard.models import ViewMode

        return tuple(v.value for v in ViewMode)
    if key == "default_sort":
        from todoboard.pipeline import SORT_PRESETS

        return tuple(SORT_PRESETS)
    if key == "default_format":
        from todoboard.formatters import FORMATTERS

        return tuple(FORMATTERS)
    return None


class ConfigMeta:
    """Setting descriptions shown by `todoboard config`."""

    SETTINGS: dict[str, str] = {
        "items_per_page": "Tasks per page in list view",
        "search_debounce_ms": "Delay before a typed search is applied",
        "default_view": "View the shell starts in",
        "default_sort": "Sort preset applied on startup",
        "default_format": "Output format for `show` without --view/--format",
        "date_format": "strftime format for the Created column",
    }


class Config:
    """Settings resolved from defaults, then config.json, then environment."""

    DEFAULTS: dict[str, Any] = {
        "items_per_page": 25,
        "search_debounce_ms": 300,
        "default_view": "list",
        "default_sort": "default",
        "default_format": "list",
        "date_format": "%Y-%m-%d",
    }

    def __init__(self, config_dir: Path | None = None):
        self._config_dir = config_dir or get_default_config_dir()
        self._config_file = self._config_dir / "config.json"
        self._data: dict[str, Any] = {}

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def config_file(self) -> Path:
        return self._config_file

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Load settings. Only the default directory's Config is cached."""
        global _config_cache

        if config_dir is None and _config_cache is not None:
            return _config_cache

        config = cls(config_dir)
        config._load_from_file()
        config._apply_env_overrides()

        if config_dir is None:
            _config_cache = config
        return config

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._data:
            return self._data[name]
        if name in self.DEFAULTS:
            return self.DEFAULTS[name]
        raise AttributeError(f"Config has no attribute '{name}'")

    @property
    def search_debounce(self) -> float:
        """Debounce delay in seconds."""
        return self.search_debounce_ms / 1000

    def get_settings(self) -> list[tuple[str, str, Any]]:
        """(key, description, current value) for every setting."""
        return [(key, desc, getattr(self, key)) for key, desc in ConfigMeta.SETTINGS.items()]

    def set(self, key: str, value: Any) -> None:
        """Validate, store and persist one setting.

        String values are coerced to the setting's type first, so CLI input
        like "50" works for integer settings.
        """
        self._data[key] = self.validate(key, value)
        self._save()

    def reset(self, key: str) -> None:
        """Forget a stored value so the default applies again."""
        self._check_key(key)
        if self._data.pop(key, None) is not None:
            self._save()

    @classmethod
    def _check_key(cls, key: str) -> None:
        if key not in cls.DEFAULTS:
            known = ", ".join(cls.DEFAULTS)
            raise ConfigError(f"Unknown setting: {key}. Known: {known}")

    @classmethod
    def validate(cls, key: str, value: Any) -> Any:
        """Return value coerced to the setting's type, or raise ConfigError."""
        cls._check_key(key)
        target_type = type(cls.DEFAULTS[key])
        if isinstance(value, str) and target_type is not str:
            try:
                value = cls._coerce(value, target_type)
            except ValueError:
                raise ConfigError(f"{key} must be {target_type.__name__}, got {value!r}") from None
        if not isinstance(value, target_type) or (isinstance(value, bool) and target_type is not bool):
            raise ConfigError(f"{key} must be {target_type.__name__}, got {value!r}")
        if target_type is int and value < 0:
            raise ConfigError(f"{key} must not be negative")
        allowed = _choices(key)
        if allowed is not None and value not in allowed:
            raise ConfigError(f"Invalid {key}: {value!r}. Valid: {', '.join(map(str, allowed))}")
        return value

    def _load_from_file(self) -> None:
        if not self._config_file.exists():
            return
        try:
            content = self._config_file.read_text()
            raw = json.loads(content) if content.strip() else {}
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable config file %s", self._config_file)
            return
        if not isinstance(raw, dict):
            logger.warning("Ignoring config file %s: expected a JSON object", self._config_file)
            return
        for key, value in raw.items():
            try:
                self._data[key] = self.validate(key, value)
            except ConfigError as e:
                logger.warning("%s: %s (using default)", self._config_file.name, e)

    def _save(self) -> None:
        self._config_dir.mkdir(parents=True, exist_ok=True)
        self._config_file.write_text(json.dumps(self._data, indent=2))

    def _apply_env_overrides(self) -> None:
        """TODOBOARD_<KEY> beats the file. Bad values are logged and skipped."""
        for key in self.DEFAULTS:
            env_key = ENV_PREFIX + key.upper()
            if env_key not in os.environ:
                continue
            try:
                self._data[key] = self.validate(key, os.environ[env_key])
            except ConfigError as e:
                logger.warning("%s: %s", env_key, e)

    @staticmethod
    def _coerce(value: str, target_type: type) -> Any:
        if target_type is bool:
            return value.lower() in ("true", "1", "yes")
        if target_type is int:
            return int(value)
        return value
