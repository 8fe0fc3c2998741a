"""Configuration loading and management for duplo.

Configuration sources are merged in priority order:
    1. Defaults (defined in DuploConfig)
    2. Global config (~/.duplo.toml)
    3. Project config (./duplo.toml)
    4. Explicit config file (--config)
    5. Environment variables (DUPLO_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(min_block_size=6, xml=True)
    >>> config.min_block_size
    6
    >>> config.xml
    True
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import DuploError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

GLOBAL_CONFIG_NAME = ".duplo.toml"
PROJECT_CONFIG_NAME = "duplo.toml"
ENV_PREFIX = "DUPLO_"


@dataclass(frozen=True)
class DuploConfig:
    """Settings for one duplicate-detection run.

    Attributes:
        Detection thresholds:
            min_block_size: Minimum number of consecutive equal lines reported
            min_chars: Lines shorter than this (after trimming) are ignored
            block_percent_threshold: Percentage of the larger file a block
                must cover (1-100); it can only lower the effective minimum

        Line and pair filtering:
            ignore_preprocessor: Drop lines whose first character is '#'
            ignore_same_filename: Skip pairs of distinct files sharing a
                base name

        Output:
            xml: Write the XML report instead of plain text
            verbosity: Logging verbosity level

        Resources:
            matrix_capacity: Addressable cells of the match matrix
                (None = numpy's index limit)
    """

    min_block_size: int = 4
    min_chars: int = 3
    block_percent_threshold: int = 100

    ignore_preprocessor: bool = False
    ignore_same_filename: bool = False

    xml: bool = False
    verbosity: Verbosity = "normal"

    matrix_capacity: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        # TOML values arrive untyped
        for name in ("min_block_size", "min_chars", "block_percent_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        for name in ("ignore_preprocessor", "ignore_same_filename", "xml"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be true or false, got {value!r}")
        if self.matrix_capacity is not None and (
            isinstance(self.matrix_capacity, bool) or not isinstance(self.matrix_capacity, int)
        ):
            raise ValueError(f"matrix_capacity must be an integer, got {self.matrix_capacity!r}")

        if self.min_block_size < 1:
            raise ValueError("min_block_size must be at least 1")
        if self.min_chars < 0:
            raise ValueError("min_chars must be non-negative")
        if not 1 <= self.block_percent_threshold <= 100:
            raise ValueError("block_percent_threshold must be between 1 and 100")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")
        if self.matrix_capacity is not None and self.matrix_capacity < 1:
            raise ValueError("matrix_capacity must be at least 1")


DEFAULT_CONFIG = DuploConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> DuploConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated DuploConfig instance

    Raises:
        DuploError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise DuploError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(merged) - set(DuploConfig.__dataclass_fields__)
    if unknown:
        raise DuploError(f"Invalid configuration: unknown option(s) {', '.join(sorted(unknown))}")

    try:
        return DuploConfig(**merged)
    except ValueError as e:
        key = str(e).split(" ", 1)[0]
        raise InvalidConfigError(key, merged.get(key), str(e))


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from DUPLO_* environment variables.

    Supported environment variables:
        DUPLO_MIN_BLOCK_SIZE: int
        DUPLO_MIN_CHARS: int
        DUPLO_BLOCK_PERCENT_THRESHOLD: int
        DUPLO_IGNORE_PREPROCESSOR: bool (true/false/1/0)
        DUPLO_IGNORE_SAME_FILENAME: bool
        DUPLO_XML: bool
        DUPLO_VERBOSITY: quiet/normal/verbose
        DUPLO_MATRIX_CAPACITY: int

    Returns:
        Dict of field_name -> parsed_value for any DUPLO_* vars found.
    """
    type_hints = get_type_hints(DuploConfig)

    result: dict[str, Any] = {}

    for field_name in DuploConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the type is not supported

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    A ``[duplo]`` table is used when present, otherwise the top level.

    Raises:
        DuploError: If TOML support is missing or parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise DuploError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise DuploError(f"Invalid config file '{path}': {e}")

    section = data.get("duplo")
    return dict(section) if isinstance(section, dict) else data
