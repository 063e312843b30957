# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the phpstyle package."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field

from .severity import Severity


class Diagnostic(BaseModel):
    """Normalized style diagnostic reported by the lint engine."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int = Field(ge=0)
    column: int | None = None
    source: str
    message: str
    severity: Severity = Severity.ERROR
    type: str | None = None
    fixable: bool = False


@dataclass(frozen=True, slots=True)
class BaselineEntry:
    """Identity key of a previously accepted diagnostic."""

    file: str
    source: str
    line: int

    @classmethod
    def from_diagnostic(cls, diagnostic: Diagnostic) -> BaselineEntry:
        return cls(file=diagnostic.file, source=diagnostic.source, line=diagnostic.line)


class ScanMode(str, Enum):
    """How the paths in a :class:`ChangeSet` were selected."""

    EMPTY = "empty"
    EXPLICIT = "explicit"
    CHANGED = "changed"
    WHITELIST = "whitelist"


def _dedupe(paths: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        ordered.append(path)
    return tuple(ordered)


@dataclass(frozen=True, slots=True)
class ChangeSet:
    """Ordered, de-duplicated set of paths scanned by one run.

    Attributes:
        mode: Strategy that produced ``paths``.
        paths: Project-relative files (or directories in whitelist mode).
        ancestor: Display name of the git ancestor when git was consulted.
        new_files: Subset of ``paths`` added since the ancestor.
    """

    mode: ScanMode
    paths: tuple[str, ...] = ()
    ancestor: str | None = None
    new_files: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def create(
        cls,
        mode: ScanMode,
        paths: Iterable[str],
        *,
        ancestor: str | None = None,
        new_files: Iterable[str] = (),
    ) -> ChangeSet:
        """Build a change set, dropping duplicate paths while keeping order."""

        ordered = _dedupe(paths)
        if not ordered:
            return cls(mode=ScanMode.EMPTY, ancestor=ancestor)
        return cls(mode=mode, paths=ordered, ancestor=ancestor, new_files=frozenset(new_files) & set(ordered))

    @property
    def is_empty(self) -> bool:
        return not self.paths

    def is_new(self, path: str) -> bool:
        return path in self.new_files

    def __len__(self) -> int:
        return len(self.paths)


class ExitStatus(IntEnum):
    """Process exit codes returned by the CLI commands."""

    SUCCESS = 0
    FAILURE = 1
    INVALID = 2


__all__ = [
    "BaselineEntry",
    "ChangeSet",
    "Diagnostic",
    "ExitStatus",
    "ScanMode",
]
