"""Configuration management for solr-query."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from solr_query.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)

DEFAULT_FIELD = "text"
DEFAULT_MAX_DEPTH = 32

# Each nesting level costs a few interpreter frames; stay well below the
# default recursion limit.
MAX_DEPTH_LIMIT = 128


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "solr-query" / "config.toml"


@dataclass(frozen=True)
class ParserConfig:
    """Immutable parser configuration.

    Attributes:
        strict: Reject unknown fields and unterminated quotes instead of
            recovering from them.
        allowed_fields: Field names accepted in strict mode. Usually supplied
            by schema introspection of the target index.
        default_field: Field assumed when a clause has no ``field:`` prefix.
        max_depth: Maximum nesting depth of bracket groups, at most
            ``MAX_DEPTH_LIMIT``.
    """

    strict: bool = False
    allowed_fields: frozenset[str] = frozenset()
    default_field: str = DEFAULT_FIELD
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        # Accept any iterable of names from callers, store a frozenset.
        if not isinstance(self.allowed_fields, frozenset):
            object.__setattr__(
                self, "allowed_fields", _coerce_fields("allowed_fields", self.allowed_fields)
            )
        if not isinstance(self.strict, bool):
            raise ConfigValidationError("strict", self.strict, "must be a boolean")
        if not isinstance(self.default_field, str) or not self.default_field:
            raise ConfigValidationError(
                "default_field", self.default_field, "must be a non-empty string"
            )
        if (
            not isinstance(self.max_depth, int)
            or isinstance(self.max_depth, bool)
            or self.max_depth < 1
        ):
            raise ConfigValidationError("max_depth", self.max_depth, "must be a positive integer")
        if self.max_depth > MAX_DEPTH_LIMIT:
            raise ConfigValidationError(
                "max_depth", self.max_depth, f"must not exceed {MAX_DEPTH_LIMIT}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], prefix: str = "") -> ParserConfig:
        """Build a ParserConfig from a mapping, rejecting unknown keys.

        Args:
            data: Mapping with any of ``strict``, ``allowed_fields``,
                ``default_field`` and ``max_depth``.
            prefix: Key prefix used in error messages (e.g. ``"parser."``).

        Raises:
            ConfigValidationError: On unknown keys or invalid values.
        """
        known = {"strict", "allowed_fields", "default_field", "max_depth"}
        for key in data:
            if key not in known:
                raise ConfigValidationError(
                    f"{prefix}{key}", data[key], f"unknown key (expected one of {sorted(known)})"
                )

        try:
            return cls(**data)
        except ConfigValidationError as e:
            if not prefix:
                raise
            raise ConfigValidationError(f"{prefix}{e.key}", e.value, e.reason) from e

    def is_allowed(self, field_name: str) -> bool:
        """Return whether ``field_name`` passes the allow-list check."""
        if not self.strict:
            return True
        return field_name in self.allowed_fields


def _coerce_fields(key: str, value: object) -> frozenset[str]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ConfigValidationError(key, value, "must be a list of strings")
    names = list(value)
    for name in names:
        if not isinstance(name, str):
            raise ConfigValidationError(key, value, "must be a list of strings")
    return frozenset(names)


@dataclass
class Config:
    """Application configuration.

    Attributes:
        parser: Parser settings (strict mode, allowed fields, default field).
        colored_output: Whether to use colored terminal output.
        include_default_field: Emit ``text:`` prefixes for default-field terms.
        optimize: Run the optimize pass by default.
        config_path: Path where config was loaded from (None if defaults).
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    colored_output: bool = True
    include_default_field: bool = False
    optimize: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.
        """
        warnings: list[str] = []

        if self.parser.strict and not self.parser.allowed_fields:
            warnings.append(
                "Strict mode is enabled but parser.allowed_fields is empty; "
                "every field:value clause will be rejected"
            )

        if (
            self.parser.allowed_fields
            and self.parser.default_field not in self.parser.allowed_fields
        ):
            warnings.append(
                f"Default field '{self.parser.default_field}' is not in parser.allowed_fields"
            )

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        # Use defaults
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: solr-query init-config"
        )
        return config, warnings + config.validate()

    # Load from file
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    return config, warnings + config.validate()


def _get_table(data: dict[str, Any], name: str, known: set[str]) -> dict[str, Any]:
    """Return the ``[name]`` table, rejecting non-table values and unknown keys."""
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigValidationError(name, table, "must be a table")
    for key in table:
        if key not in known:
            raise ConfigValidationError(
                f"{name}.{key}", table[key], f"unknown key (expected one of {sorted(known)})"
            )
    return table


def _get_bool(table: dict[str, Any], section: str, key: str, default: bool) -> bool:
    value = table.get(key, default)
    if not isinstance(value, bool):
        raise ConfigValidationError(f"{section}.{key}", value, "must be a boolean")
    return value


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [parser] section
    parser = data.get("parser", {})
    if not isinstance(parser, dict):
        raise ConfigValidationError("parser", parser, "must be a table")
    config.parser = ParserConfig.from_dict(parser, prefix="parser.")

    # Parse [display] section
    display = _get_table(data, "display", {"colored_output"})
    config.colored_output = _get_bool(display, "display", "colored_output", config.colored_output)

    # Parse [output] section
    output = _get_table(data, "output", {"include_default_field", "optimize"})
    config.include_default_field = _get_bool(
        output, "output", "include_default_field", config.include_default_field
    )
    config.optimize = _get_bool(output, "output", "optimize", config.optimize)

    return config


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.

    Returns:
        The resolved path that was written.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Build TOML structure
    data: dict[str, Any] = {
        "parser": {
            "strict": config.parser.strict,
            "allowed_fields": sorted(config.parser.allowed_fields),
            "default_field": config.parser.default_field,
            "max_depth": config.parser.max_depth,
        },
        "display": {
            "colored_output": config.colored_output,
        },
        "output": {
            "include_default_field": config.include_default_field,
            "optimize": config.optimize,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

    return config_path
