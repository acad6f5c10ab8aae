# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and filesystem discovery for dotboot.

Handles:
- Data root resolution (DOTBOOT_DATA_HOME, ~/.local/share)
- Packaged YAML defaults loading (dotboot/defaults/bootstrap.yaml)
- User override discovery ($DOTBOOT_CONFIG, ~/.config/dotboot/bootstrap.yaml)
- Unit name and clone timeout validation
- ANSI coloring constants for console messages
"""

from __future__ import annotations

import copy
import os
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml


# -----------------------
# UI constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "red": "\033[31m",
    "dim": "\033[2m",
    "reset": "\033[0m",
}

# Message kind -> (color, marker)
MESSAGE_STYLES: dict[str, tuple[str, str]] = {
    "success": ("green", "✔"),
    "warning": ("yellow", "!"),
    "info": ("blue", "➜"),
    "error": ("red", "✖"),
}

DEFAULTS_FILENAME = "bootstrap.yaml"


# -----------------------
# Config model wrapper
# -----------------------


class BootstrapConfig:
    """Config wrapper that implements the ConfigModel protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict
        self._units = validate_units(config_dict.get("units") or [])
        self._clone_timeout = validate_timeout(
            self.get_path("clone.timeout", 600)
        )

    @property
    def repo_url(self) -> str:
        return str(self.get_path("repository.url", ""))

    @property
    def dotfiles_dir(self) -> Path:
        return expand_path(self.get_path("paths.dotfiles_dir", "~/.dotfiles"))

    @property
    def config_dir(self) -> Path:
        return expand_path(self.get_path("paths.config_dir", "~/.config"))

    @property
    def backup_parent(self) -> Path:
        return expand_path(self.get_path("paths.backup_parent", "~"))

    @property
    def backup_prefix(self) -> str:
        return str(self.get_path("backup.prefix", ".config_backups_"))

    @property
    def timestamp_format(self) -> str:
        return str(self.get_path("backup.timestamp_format", "%Y%m%d_%H%M%S"))

    @property
    def clone_timeout(self) -> int:
        return self._clone_timeout

    @property
    def units(self) -> list[str]:
        return list(self._units)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("paths.config_dir", "~/.config")
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


def expand_path(value: Any) -> Path:
    """Expand ~ and $VARS in a configured path."""
    return Path(os.path.expandvars(os.path.expanduser(str(value))))


def validate_units(raw: Any) -> list[str]:
    """Validate the configured unit list.

    Each unit name must be a single path component so that
    source_root/name and target_root/name never escape their roots.

    Raises:
        ValueError: if the list or any name is malformed
    """
    if not isinstance(raw, list):
        raise ValueError("'units' must be a list of names.")

    names: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise ValueError(f"Unit name must be a string, got {item!r}")
        name = item.strip()
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            raise ValueError(f"Invalid unit name: {item!r}")
        names.append(name)
    return names


def validate_timeout(raw: Any) -> int:
    """Validate clone.timeout: a positive whole number of seconds.

    Raises:
        ValueError: if the value is not a positive integer
    """
    if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
        raise ValueError(
            f"'clone.timeout' must be a positive integer, got {raw!r}"
        )
    return raw


# -----------------------
# Data root helpers
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for dotboot.

    Resolution order:
    1. DOTBOOT_DATA_HOME environment variable (if set)
    2. ~/.local/share (default, XDG_DATA_HOME is ignored)
    """
    data_home = os.getenv("DOTBOOT_DATA_HOME")
    if data_home:
        root = Path(data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def logs_dir(data_root: Path) -> Path:
    """<data_root>/dotboot/logs"""
    return data_root / "dotboot" / "logs"


def user_config_path() -> Path:
    """Location of the optional per-user override file.

    $DOTBOOT_CONFIG wins; otherwise ~/.config/dotboot/bootstrap.yaml.
    """
    explicit = os.getenv("DOTBOOT_CONFIG")
    if explicit:
        return expand_path(explicit)
    return Path.home() / ".config" / "dotboot" / DEFAULTS_FILENAME


# -----------------------
# YAML loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to packaged defaults directory."""
    return Path(
        importlib_resources.files("dotboot.defaults")
    )  # type: ignore[arg-type]


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"YAML file {path} must load to a mapping/dict.")
    return data


def load_defaults_yaml(filename: str = DEFAULTS_FILENAME) -> dict[str, Any]:
    """
    Load a YAML file from dotboot/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )
    return _read_yaml_mapping(path)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested dicts merge, the rest replaces."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_bootstrap_config(override_path: Path | None = None) -> BootstrapConfig:
    """
    Load packaged defaults, merge the user override (if any) and wrap it.

    An explicitly requested override ($DOTBOOT_CONFIG or override_path) must
    exist; the implicit ~/.config location is optional.
    """
    data = load_defaults_yaml()

    explicit = override_path is not None or bool(os.getenv("DOTBOOT_CONFIG"))
    path = override_path if override_path is not None else user_config_path()

    if path.exists():
        data = deep_merge(data, _read_yaml_mapping(path))
    elif explicit:
        raise FileNotFoundError(f"Config override not found: {path}")

    return BootstrapConfig(data)
