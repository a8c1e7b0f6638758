# src/memo/config.py

"""
Configuration for memo.

Resolves where the store lives and holds the few policy switches the
commands consult. The result is a MemoConfig object handed to the
engine; engine modules never look at the environment themselves.

Store path precedence:
1. MEMO_PATH environment variable
2. `memo_path` in the config file
3. ~/.memo

Config file location: MEMO_CONFIG environment variable, else ~/.memorc.
The file is YAML, for example:

    memo_path: ~/notes/.memo
    confirm_delete_all: true
    mark_done_after_days: 30
    color: true
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Final, Mapping, Optional

import yaml

from memo.engine.model import StoreFile


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

ENV_PATH: Final[str] = "MEMO_PATH"
ENV_CONFIG: Final[str] = "MEMO_CONFIG"

DEFAULT_STORE_NAME: Final[str] = ".memo"
DEFAULT_CONFIG_NAME: Final[str] = ".memorc"


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConfigError(Exception):
    """
    Raised when the config file cannot be read or has invalid values.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------
# Config object
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MemoConfig:
    """
    Resolved settings.

    `mark_done_after_days` of None disables automatic marking.
    """

    store_path: str
    confirm_delete_all: bool = True
    mark_done_after_days: Optional[int] = None
    color: bool = True
    source: str = ""  # config file the values came from, "" if none

    @property
    def store(self) -> StoreFile:
        return StoreFile.at(self.store_path)

    def confirm_before_delete_all(self) -> bool:
        return self.confirm_delete_all

    def auto_mark_done_cutoff(self, today: date) -> Optional[date]:
        """
        Return the date before which records are marked done, or None.
        """
        if self.mark_done_after_days is None:
            return None
        return today - timedelta(days=self.mark_done_after_days)


# ---------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------

def load_config(
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> MemoConfig:
    """
    Build a MemoConfig from the environment and the optional config file.

    `env` and `home` default to os.environ and Path.home().
    """
    env = os.environ if env is None else env
    home = Path.home() if home is None else Path(home)

    config_path = _config_path(env, home)
    data = _read_config_file(config_path)

    store_path = env.get(ENV_PATH, "").strip()
    if not store_path:
        store_path = _optional_str(str(config_path), data, "memo_path") or str(home / DEFAULT_STORE_NAME)

    days = _optional_int(str(config_path), data, "mark_done_after_days")
    if days is not None and days < 0:
        raise ConfigError(str(config_path), "'mark_done_after_days' must not be negative")

    return MemoConfig(
        store_path=_absolute(store_path, home),
        confirm_delete_all=_optional_bool(str(config_path), data, "confirm_delete_all", default=True),
        mark_done_after_days=days,
        color=_optional_bool(str(config_path), data, "color", default=True),
        source=str(config_path) if data else "",
    )


def _config_path(env: Mapping[str, str], home: Path) -> Path:
    raw = env.get(ENV_CONFIG, "").strip()
    if raw:
        return Path(_absolute(raw, home))
    return home / DEFAULT_CONFIG_NAME


def _absolute(raw: str, home: Path) -> str:
    s = raw.strip()
    if s == "~" or s.startswith("~/"):
        s = str(home) + s[1:]
    return str(Path(s).absolute())


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(path), f"Cannot read file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(str(path), "YAML root must be a mapping/dictionary")

    return data


def _optional_str(path: str, data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(path, f"YAML key '{key}' must be a string")
    return value.strip()


def _optional_bool(path: str, data: dict[str, Any], key: str, *, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(path, f"YAML key '{key}' must be true or false")
    return value


def _optional_int(path: str, data: dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(path, f"YAML key '{key}' must be an integer")
    return value
