"""Configuration for xqDoc comment processing.

Configuration can be built directly, from a dictionary, or loaded from a
file with environment variable overrides:

- File sources: YAML (``.yaml``/``.yml``), JSON and TOML
- Environment: ``XQDOC_<FIELD>`` variables, e.g. ``XQDOC_NAMESPACE_PREFIX``

Example:
    from xqdoc.config import CommentConfig, load_config

    config = CommentConfig(namespace_prefix="xqdoc")

    # Or from a file, with XQDOC_* variables taking precedence
    config = load_config("xqdoc.yaml")
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from xqdoc.base import XQDocError

logger = logging.getLogger(__name__)

ENV_PREFIX = "XQDOC"

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(XQDocError):
    """Base configuration error."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Configuration validation failed: {', '.join(errors)}")


class ConfigSourceError(ConfigError):
    """Configuration source error."""

    pass


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class CommentConfig:
    """Configuration for comment parsing and serialization.

    Attributes:
        namespace_prefix: Prefix for every emitted element ("" for none)
        custom_attribute: Attribute name carried by custom sections
        close_unterminated: Close a section left open at end of input
        strict_reset: Refuse to reuse a parser without clear()
    """

    namespace_prefix: str = ""
    custom_attribute: str = "tag"
    close_unterminated: bool = True
    strict_reset: bool = True

    @classmethod
    def field_types(cls) -> dict[str, type]:
        """Map of field name to expected value type."""
        defaults = cls()
        return {f.name: type(getattr(defaults, f.name)) for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommentConfig":
        """Create a configuration from a dictionary.

        Args:
            data: Mapping of field names to values

        Returns:
            Validated CommentConfig

        Raises:
            ConfigValidationError: Unknown keys or values of the wrong type
        """
        expected = cls.field_types()
        errors = []
        for key, value in data.items():
            if key not in expected:
                errors.append(f"Unknown configuration key: {key}")
            elif not isinstance(value, expected[key]):
                errors.append(
                    f"Invalid type for {key}: expected {expected[key].__name__}, "
                    f"got {type(value).__name__}"
                )
        if errors:
            raise ConfigValidationError(errors)
        return cls(**data)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "CommentConfig":
        """Create a configuration from defaults plus environment variables."""
        return cls.from_dict(_load_env(prefix))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


# =============================================================================
# Sources
# =============================================================================


def _load_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigSourceError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    try:
        content = path.read_text(encoding="utf-8")
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif suffix == ".json":
            data = json.loads(content)
        elif suffix == ".toml":
            data = tomllib.loads(content)
        else:
            raise ConfigSourceError(f"Unsupported file format: {suffix}")
    except (OSError, yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigSourceError(f"Failed to load config: {e}") from e

    if not isinstance(data, dict):
        raise ConfigSourceError(f"Configuration root must be a mapping: {path}")
    return data


def _parse_env_value(value: str, expected: type) -> Any:
    if expected is bool:
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigValidationError([f"Invalid boolean value: {value!r}"])
    return value


def _load_env(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    expected = CommentConfig.field_types()
    env_prefix = f"{prefix}_"
    result: dict[str, Any] = {}

    for key, value in os.environ.items():
        if not key.startswith(env_prefix):
            continue
        name = key[len(env_prefix):].lower()
        if name not in expected:
            logger.debug("Ignoring unrelated environment variable %s", key)
            continue
        result[name] = _parse_env_value(value, expected[name])

    return result


def load_config(
    path: str | Path | None = None,
    *,
    use_env: bool = True,
    env_prefix: str = ENV_PREFIX,
) -> CommentConfig:
    """Load configuration from a file and the environment.

    Args:
        path: Optional YAML, JSON or TOML file
        use_env: Apply ``<env_prefix>_*`` environment variable overrides
        env_prefix: Environment variable prefix

    Returns:
        Merged CommentConfig (environment overrides file values)

    Raises:
        ConfigSourceError: File missing, unreadable or of unknown format
        ConfigValidationError: Invalid keys or values
    """
    data: dict[str, Any] = {}
    if path is not None:
        data.update(_load_file(Path(path)))
        logger.debug("Loaded configuration from %s", path)
    if use_env:
        data.update(_load_env(env_prefix))
    return CommentConfig.from_dict(data)
