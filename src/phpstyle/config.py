# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and loaders for the phpstyle toolchain."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
STANDALONE_FILENAME: Final[str] = "phpstyle.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "phpstyle"

DEFAULT_WHITELISTED_DIRECTORIES: Final[tuple[str, ...]] = (
    "tests",
    "classes",
    "libraries/core/modules",
    "src",
    "app",
)
DEFAULT_BASELINE_DIRECTORIES: Final[tuple[str, ...]] = ("tests", "classes", "libraries/core/modules")
DEFAULT_CONTAINER_PREFIXES: Final[tuple[str, ...]] = ("/opt/project/", "/app/")


class StyleConfig(BaseModel):
    """Settings shared by every phpstyle command.

    The model is frozen: it is built once per invocation and threaded through
    the pipeline as a read-only value.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    whitelisted_directories: tuple[str, ...] = DEFAULT_WHITELISTED_DIRECTORIES
    baseline_directories: tuple[str, ...] = DEFAULT_BASELINE_DIRECTORIES
    excluded_directories: tuple[str, ...] = ()
    container_prefixes: tuple[str, ...] = DEFAULT_CONTAINER_PREFIXES
    real_app_root: str | None = None
    php_version: str | None = None
    standard: str = "Plotbox"
    extension: str = "php"
    parallel: int = Field(default=6, ge=1)
    baseline_parallel: int = Field(default=16, ge=1)
    max_changed_files: int = Field(default=500, ge=1)
    baseline_filename: str = "phpcs.baseline"

    @field_validator("extension")
    @classmethod
    def _strip_extension_dot(cls, value: str) -> str:
        return value.lstrip(".")

    @field_validator("real_app_root")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/") or "/"

    @property
    def suffix(self) -> str:
        """Return the file suffix (with leading dot) of scanned sources."""

        return f".{self.extension}"

    def baseline_path(self, root: Path, override: Path | None = None) -> Path:
        """Return the baseline snapshot location for ``root``.

        Args:
            root: Project root directory.
            override: Explicit baseline path supplied on the command line.

        Returns:
            Path: Absolute path of the baseline snapshot file.
        """

        if override is not None:
            return override if override.is_absolute() else root / override
        return root / self.baseline_filename

    def with_overrides(self, **overrides: Any) -> StyleConfig:
        """Return a validated copy with ``None``-valued overrides ignored.

        Raises:
            ConfigError: If an override fails validation.
        """

        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return self
        try:
            return StyleConfig.model_validate({**self.model_dump(), **updates})
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _section_from_pyproject(path: Path) -> Mapping[str, Any] | None:
    data = _read_toml(path)
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return None
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return None
    if not isinstance(section, Mapping):
        raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return section


def load_config(root: Path) -> StyleConfig:
    """Load configuration for the project rooted at ``root``.

    ``phpstyle.toml`` takes precedence over ``[tool.phpstyle]`` in
    ``pyproject.toml``; built-in defaults apply when neither exists.

    Args:
        root: Project root directory.

    Returns:
        StyleConfig: Validated configuration.

    Raises:
        ConfigError: If a configuration file is malformed or invalid.
    """

    payload: Mapping[str, Any] | None = None
    standalone = root / STANDALONE_FILENAME
    pyproject = root / PYPROJECT_FILENAME
    if standalone.is_file():
        payload = _read_toml(standalone)
    elif pyproject.is_file():
        payload = _section_from_pyproject(pyproject)
    if not payload:
        return StyleConfig()
    try:
        return StyleConfig.model_validate(dict(payload))
    except ValidationError as exc:
        raise ConfigError(f"Invalid phpstyle configuration: {exc}") from exc


__all__ = [
    "DEFAULT_BASELINE_DIRECTORIES",
    "DEFAULT_CONTAINER_PREFIXES",
    "DEFAULT_WHITELISTED_DIRECTORIES",
    "StyleConfig",
    "load_config",
]
