# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve the set of files a style run should scan."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..config import StyleConfig
from ..diagnostics.exclusion import PathExclusionPolicy
from ..models import ChangeSet, ScanMode
from .git import BranchModifications, VersionControl

LOGGER = logging.getLogger(__name__)


class ChangeSetResolver:
    """Select explicit, changed, or whitelisted paths for the lint engine."""

    def __init__(
        self,
        root: Path,
        config: StyleConfig,
        vcs: VersionControl,
        *,
        exclusions: PathExclusionPolicy | None = None,
    ) -> None:
        """Create a resolver bound to a project root.

        Args:
            root: Project root; relative paths are evaluated against it.
            config: Active configuration (whitelist, extension, threshold).
            vcs: Version-control collaborator used when no paths are given.
            exclusions: Exclusion policy; defaults to the configured directories.
        """

        self._root = root
        self._config = config
        self._vcs = vcs
        self._exclusions = exclusions or PathExclusionPolicy(config.excluded_directories)

    def resolve(self, explicit_paths: Sequence[str] = ()) -> ChangeSet:
        """Return the :class:`ChangeSet` for this run.

        Args:
            explicit_paths: Caller-supplied paths. When present they are used
                as given apart from dropping paths that no longer exist.

        Returns:
            ChangeSet: Paths to scan; empty when nothing qualifies.

        Raises:
            ChangeSetResolutionError: If the git collaborator fails.
        """

        if explicit_paths:
            return ChangeSet.create(ScanMode.EXPLICIT, (path for path in explicit_paths if self._exists(path)))

        self._vcs.fetch_all()
        modifications = self._vcs.branch_modifications()
        candidates = self.qualifying_files(modifications)
        if not candidates:
            return ChangeSet.create(ScanMode.EMPTY, (), ancestor=modifications.ancestor)
        if len(candidates) > self._config.max_changed_files:
            LOGGER.debug(
                "changed files exceed threshold count=%d limit=%d",
                len(candidates),
                self._config.max_changed_files,
            )
            return ChangeSet.create(
                ScanMode.WHITELIST,
                self.existing_whitelisted_directories(),
                ancestor=modifications.ancestor,
            )
        return ChangeSet.create(
            ScanMode.CHANGED,
            candidates,
            ancestor=modifications.ancestor,
            new_files=modifications.new_paths,
        )

    def qualifying_files(self, modifications: BranchModifications) -> list[str]:
        """Filter modified paths down to scannable source files."""

        whitelist = self.existing_whitelisted_directories()
        return self._exclusions.filter_paths(
            path
            for path in modifications.modified_paths
            if self._exists(path)
            and path.endswith(self._config.suffix)
            and any(path.startswith(directory) for directory in whitelist)
        )

    def existing_whitelisted_directories(self) -> list[str]:
        return [directory for directory in self._config.whitelisted_directories if (self._root / directory).is_dir()]

    def _exists(self, path: str) -> bool:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self._root / candidate
        try:
            return candidate.exists()
        except OSError:
            return False


__all__ = ["ChangeSetResolver"]
