"""Configuration helpers for the quotation builder."""
from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

RESOURCE_DIR = Path(__file__).resolve().parent / "resources"
DEFAULT_VERSION = 1
APP_SETTINGS_ENV_VAR = "QUOTE_BUILDER_APP_SETTINGS"
STORE_DIR_ENV_VAR = "QUOTE_BUILDER_STORE_DIR"
STATE_FILE_ENV_VAR = "QUOTE_BUILDER_STATE_FILE"
LOG_LEVEL_ENV_VAR = "QUOTE_BUILDER_LOG_LEVEL"
_APP_SETTINGS_CACHE: dict[str, Any] | None = None

LOGGER_NAME = "quote_builder"


def get_logger(*names: str) -> logging.Logger:
    """Return a logger under the shared quotation builder namespace."""

    if not names:
        return logging.getLogger(LOGGER_NAME)
    qualified = ".".join((LOGGER_NAME, *names))
    return logging.getLogger(qualified)


logger = get_logger("config")


def configure_logging(level: int | str = logging.INFO, *, force: bool = False) -> None:
    """Initialise a basic logging configuration if none is present."""

    if isinstance(level, str):
        level = getattr(logging, level.strip().upper(), logging.INFO)

    root = logging.getLogger()
    if root.handlers and not force:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        force=force,
    )


class ConfigError(RuntimeError):
    """Raised when configuration data cannot be loaded or validated."""


@dataclass(frozen=True)
class AppEnvironment:
    """Runtime configuration extracted from environment variables."""

    store_dir: Path
    state_file: Path
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "AppEnvironment":
        e = os.environ if env is None else env
        data_root = Path.home() / ".quote_builder"

        store_raw = e.get(STORE_DIR_ENV_VAR)
        store_dir = Path(store_raw).expanduser() if store_raw else data_root / "quotations"

        state_raw = e.get(STATE_FILE_ENV_VAR)
        state_file = Path(state_raw).expanduser() if state_raw else data_root / "state.json"

        log_level = (e.get(LOG_LEVEL_ENV_VAR) or "INFO").strip().upper() or "INFO"
        return cls(store_dir=store_dir, state_file=state_file, log_level=log_level)


def _load_json_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Malformed JSON in {path.name}: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise ConfigError(f"Configuration root must be an object in {path.name}")

    return dict(raw)


def _merge_mappings(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if key in base and isinstance(base[key], Mapping) and isinstance(value, Mapping):
            base[key] = _merge_mappings(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _load_app_settings_raw() -> dict[str, Any]:
    base = _load_json_mapping(RESOURCE_DIR / "app_settings.json")

    override_raw = os.getenv(APP_SETTINGS_ENV_VAR)
    if override_raw:
        override_path = Path(override_raw).expanduser()
        if override_path.exists():
            try:
                override = _load_json_mapping(override_path)
            except ConfigError as exc:
                raise ConfigError(f"Failed to load override settings: {exc}") from exc
            base = _merge_mappings(base, override)
        else:
            logger.warning("Override settings path does not exist: %s", override_path)

    version = base.get("version", DEFAULT_VERSION)
    if version != DEFAULT_VERSION:
        raise ConfigError(
            f"Unsupported settings version: {version!r}; expected {DEFAULT_VERSION}"
        )
    return base


def load_app_settings(*, reload: bool = False) -> dict[str, Any]:
    """Return the merged application settings, applying optional overrides."""

    global _APP_SETTINGS_CACHE
    if reload or _APP_SETTINGS_CACHE is None:
        _APP_SETTINGS_CACHE = _load_app_settings_raw()

    return copy.deepcopy(_APP_SETTINGS_CACHE)


def load_section(name: str) -> dict[str, Any]:
    """Return one named object section from the application settings."""

    settings = load_app_settings()
    section = settings.get(name)
    if not isinstance(section, Mapping):
        raise ConfigError(f"Missing configuration section in app settings: {name}")
    return dict(section)


def default_currency() -> str:
    return str(load_app_settings().get("currency") or "")


__all__ = [
    "APP_SETTINGS_ENV_VAR",
    "AppEnvironment",
    "ConfigError",
    "DEFAULT_VERSION",
    "LOGGER_NAME",
    "LOG_LEVEL_ENV_VAR",
    "RESOURCE_DIR",
    "STATE_FILE_ENV_VAR",
    "STORE_DIR_ENV_VAR",
    "configure_logging",
    "default_currency",
    "get_logger",
    "load_app_settings",
    "load_section",
    "logger",
]
