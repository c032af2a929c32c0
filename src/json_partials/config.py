# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration models and layered TOML loading for template builds."""

from __future__ import annotations

import re
import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .references import MarkerKeys
from .types import DEFAULT_MAX_DEPTH, INCLUDE_PARTIAL_KEY, PARTIAL_KEY, PARTIAL_PATH_KEY

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PROJECT_CONFIG_FILENAME: Final[str] = ".json-partials.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "json-partials"
DEFAULT_INCLUDE_PATTERN: Final[str] = r"(?i).*\.json$"


class MarkerConfig(BaseModel):
    """Reserved key names recognised inside documents."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    include_key: str = Field(default=INCLUDE_PARTIAL_KEY, min_length=1)
    partial_key: str = Field(default=PARTIAL_KEY, min_length=1)
    path_key: str = Field(default=PARTIAL_PATH_KEY, min_length=1)

    def to_markers(self) -> MarkerKeys:
        """Return the marker keys consumed by the resolution engine."""

        return MarkerKeys(include=self.include_key, partial=self.partial_key, path=self.path_key)


class BuildConfig(BaseModel):
    """Settings controlling template discovery, resolution and output."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    source_dir: Path = Path("templates")
    target_dir: Path = Path("build/json")
    partial_root: Path | None = None
    include_pattern: str = DEFAULT_INCLUDE_PATTERN
    pretty_print: bool = True
    indent: int = Field(default=2, ge=0)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    markers: MarkerConfig = Field(default_factory=MarkerConfig)

    @field_validator("include_pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid include pattern {value!r}: {exc}") from exc
        return value

    @property
    def include_regex(self) -> re.Pattern[str]:
        """Return the compiled template name pattern."""

        return re.compile(self.include_pattern)

    @property
    def effective_partial_root(self) -> Path:
        """Return the directory partial identifiers are resolved against."""

        return self.partial_root if self.partial_root is not None else self.source_dir

    def resolved(self, root: Path) -> BuildConfig:
        """Return a copy whose relative directories are anchored at ``root``."""

        def anchor(path: Path) -> Path:
            return (path if path.is_absolute() else root / path).resolve()

        return self.model_copy(
            update={
                "source_dir": anchor(self.source_dir),
                "target_dir": anchor(self.target_dir),
                "partial_root": anchor(self.partial_root) if self.partial_root is not None else None,
            },
        )


class ConfigSource(Protocol):
    """Source of a raw configuration fragment."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the configuration fragment provided by this source."""
        ...


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self.path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{self.path}: invalid TOML ({exc})") from exc
        return _normalise_keys(data)


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.json-partials]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        data = super().load()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY.replace("-", "_"))
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"{self.path}: [tool.{PYPROJECT_SECTION_KEY}] must be a table")
        return section


class MappingConfigSource:
    """Wrap already-parsed overrides such as CLI options."""

    def __init__(self, data: Mapping[str, Any], *, name: str = "overrides") -> None:
        self._data = data
        self.name = name

    def load(self) -> Mapping[str, Any]:
        return _normalise_keys({key: value for key, value in self._data.items() if value is not None})


def default_sources(root: Path) -> tuple[ConfigSource, ...]:
    """Return the file-based configuration sources for ``root`` in precedence order."""

    return (
        PyProjectConfigSource(root / PYPROJECT_FILENAME),
        TomlConfigSource(root / PROJECT_CONFIG_FILENAME),
    )


def load_build_config(
    root: Path,
    *,
    overrides: Mapping[str, Any] | None = None,
    sources: Iterable[ConfigSource] | None = None,
) -> BuildConfig:
    """Build the effective configuration for a project rooted at ``root``.

    Args:
        root: Project root; relative directories are resolved against it.
        overrides: Highest-precedence values, typically from the CLI.
            ``None`` values are ignored.
        sources: Configuration sources replacing :func:`default_sources`.

    Returns:
        BuildConfig: Validated configuration with absolute directories.

    Raises:
        ConfigError: If a source is malformed or the merged data is invalid.
    """

    root = root.resolve()
    layers = list(sources if sources is not None else default_sources(root))
    if overrides:
        layers.append(MappingConfigSource(overrides))
    merged: dict[str, Any] = {}
    for source in layers:
        merged = _deep_merge(merged, source.load())
    try:
        config = BuildConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"invalid json-partials configuration: {exc}") from exc
    return config.resolved(root)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _normalise_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        str(key).replace("-", "_"): _normalise_keys(value) if isinstance(value, Mapping) else value
        for key, value in data.items()
    }


__all__ = [
    "DEFAULT_INCLUDE_PATTERN",
    "PROJECT_CONFIG_FILENAME",
    "BuildConfig",
    "ConfigSource",
    "MappingConfigSource",
    "MarkerConfig",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "default_sources",
    "load_build_config",
]
