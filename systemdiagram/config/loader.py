"""Helpers for loading configuration from TOML/JSON sources.

This module provides a single entry point `load_config` that accepts
various configuration sources:

* None -> default AppConfig
* dict -> AppConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from systemdiagram.config.schema import AppConfig

logger = logging.getLogger("systemdiagram.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]

_FILE_SUFFIXES = {".toml", ".tml", ".json"}


class ConfigurationError(ValueError):
    """Configuration could not be parsed or failed validation."""


def _looks_like_path(text: str, path: Path) -> bool:
    """Return True if an unreadable source was meant as a config file name."""
    if "\n" in text or text.lstrip().startswith(("{", "[")):
        return False
    return path.suffix.lower() in _FILE_SUFFIXES


def _validate(data: Dict[str, Any]) -> AppConfig:
    try:
        return AppConfig.from_dict(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def load_config(source: ConfigSource) -> AppConfig:
    """Load AppConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns AppConfig.default()
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        AppConfig instance.

    Raises:
        ConfigurationError: If the source cannot be parsed or validated.
    """
    if source is None:
        logger.debug("No config source provided; using default AppConfig")
        return AppConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading AppConfig from provided dict")
        return _validate(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        text: Optional[str] = None
        fmt: Optional[str] = None

        if path.is_file():
            text = path.read_text(encoding="utf-8")
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                stripped = text.lstrip()
                fmt = "json" if stripped.startswith(("{", "[")) else "toml"
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        elif isinstance(source, Path) or _looks_like_path(str(source), path):
            raise ConfigurationError(f"Configuration file not found: {path}")
        else:
            text = str(source)
            stripped = text.lstrip()
            fmt = "json" if stripped.startswith(("{", "[")) else "toml"
            logger.info("Loading configuration from inline %s string", fmt)

        try:
            if fmt == "json":
                data = json.loads(text)
            else:
                data = tomllib.loads(text)
        except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(f"Cannot parse {fmt} configuration: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Top-level configuration must be a mapping/dict")

        return _validate(data)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["ConfigSource", "ConfigurationError", "load_config"]
