"""
Emitter configuration.

Settings are resolved from, lowest to highest precedence:
defaults, the ``emitter`` section of a YAML file, environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

import yaml

from .errors import ExtenderConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "EXTENDERKIT_"

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off'}


def _parse_bool(name: str, raw: str) -> bool:
    text = raw.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ExtenderConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _parse_indent(name: str, raw: str) -> Optional[int]:
    text = raw.strip().lower()
    if text in ('', 'none'):
        return None
    try:
        return int(text)
    except ValueError:
        raise ExtenderConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_bool(name, value)
    raise ExtenderConfigurationError(f"{name} must be a boolean, got {value!r}")


def _coerce_indent(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_indent(name, value)
    raise ExtenderConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass
class EmitterConfig:
    """Configuration for client descriptor emission"""
    json_indent: Optional[int] = None  # None = compact output
    ensure_ascii: bool = False
    escape_script_close: bool = True  # "</" -> "<\/" for inline script blocks
    id_resolver: Optional[Callable[[str], str]] = None  # server id -> client id

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EmitterConfig":
        """Build a config from a plain mapping (e.g. a YAML section)."""
        known = {f.name for f in fields(cls)} - {'id_resolver'}
        unknown = set(data) - known
        if unknown:
            raise ExtenderConfigurationError(
                f"Unknown emitter settings: {', '.join(sorted(unknown))}"
            )
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key == 'json_indent':
                values[key] = _coerce_indent(key, value)
            else:
                values[key] = _coerce_bool(key, value)
        return cls(**values)

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "EmitterConfig":
        """Return a copy with environment overrides applied."""
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}

        key = ENV_PREFIX + "JSON_INDENT"
        if key in environ:
            overrides['json_indent'] = _parse_indent(key, environ[key])
        key = ENV_PREFIX + "ENSURE_ASCII"
        if key in environ:
            overrides['ensure_ascii'] = _parse_bool(key, environ[key])
        key = ENV_PREFIX + "ESCAPE_SCRIPT_CLOSE"
        if key in environ:
            overrides['escape_script_close'] = _parse_bool(key, environ[key])

        if overrides:
            logger.debug(f"Emitter config overrides from environment: {sorted(overrides)}")
        return replace(self, **overrides)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EmitterConfig":
        return cls().with_env(environ)


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> EmitterConfig:
    """
    Load emitter configuration.

    Args:
        path: Optional YAML file with an ``emitter:`` section
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Resolved EmitterConfig
    """
    config = EmitterConfig()

    if path is not None:
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ExtenderConfigurationError(f"{path}: invalid YAML: {e}") from None
        if not isinstance(data, dict):
            raise ExtenderConfigurationError(f"{path}: expected a mapping at top level")
        section = data.get('emitter') or {}
        if not isinstance(section, dict):
            raise ExtenderConfigurationError(f"{path}: 'emitter' must be a mapping")
        config = EmitterConfig.from_mapping(section)
        logger.info(f"Loaded emitter config from {path}")

    return config.with_env(environ)
