# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Drop diagnostics and candidate files under excluded directories."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..models import Diagnostic


@dataclass(frozen=True, slots=True)
class PathExclusionPolicy:
    """Plain string-prefix exclusion over project-relative paths.

    No glob or regex semantics apply: ``"vendor"`` also excludes
    ``"vendor-bin/x.php"``, matching how the prefixes are configured.
    """

    prefixes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # An empty prefix would match every path.
        object.__setattr__(self, "prefixes", tuple(prefix for prefix in self.prefixes if prefix))

    def is_excluded(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.prefixes)

    def filter_paths(self, paths: Iterable[str]) -> list[str]:
        return [path for path in paths if not self.is_excluded(path)]

    def apply(self, diagnostics: Sequence[Diagnostic]) -> list[Diagnostic]:
        """Return the diagnostics whose file is not excluded, order preserved."""

        if not self.prefixes:
            return list(diagnostics)
        return [diagnostic for diagnostic in diagnostics if not self.is_excluded(diagnostic.file)]


__all__ = ["PathExclusionPolicy"]
