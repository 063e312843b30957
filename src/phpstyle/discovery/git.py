# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git collaborator resolving branch modifications against an ancestor."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..core.runtime.process import CommandOptions, SubprocessExecutionError, run_command
from ..errors import ChangeSetResolutionError

LOGGER = logging.getLogger(__name__)

GitRunner = Callable[[Sequence[str], Path], list[str]]

GIT_EXECUTABLE: Final[str] = "git"
REMOTE_HEAD_SUFFIX: Final[str] = "/HEAD"
PREFERRED_BASES: Final[tuple[str, ...]] = ("main", "master", "develop")
STATUS_ADDED: Final[frozenset[str]] = frozenset({"A", "C"})
STATUS_DELETED: Final[str] = "D"


@dataclass(frozen=True, slots=True)
class BranchModifications:
    """Files modified on the current branch relative to its ancestor.

    Attributes:
        modified_paths: Project-relative paths in the order git reported them.
        ancestor: Display name of the resolved ancestor ref.
        new_paths: Paths that did not exist at the ancestor commit.
    """

    modified_paths: tuple[str, ...]
    ancestor: str
    new_paths: frozenset[str] = field(default_factory=frozenset)

    def is_new_file(self, path: str) -> bool:
        return path in self.new_paths


@runtime_checkable
class VersionControl(Protocol):
    """Narrow read-only interface the change-set resolver consumes."""

    def fetch_all(self) -> None:
        """Fetch every remote so ancestor refs are current."""

    def branch_modifications(self) -> BranchModifications:
        """Return the modification set relative to the merge-base ancestor."""


@dataclass(frozen=True, slots=True)
class _AncestorCandidate:
    ref: str
    merge_base: str
    distance: int

    def sort_key(self) -> tuple[int, int, str]:
        short_name = self.ref.rsplit("/", 1)[-1]
        preference = PREFERRED_BASES.index(short_name) if short_name in PREFERRED_BASES else len(PREFERRED_BASES)
        return (self.distance, preference, self.ref)


class GitCli(VersionControl):
    """Resolve branch modifications by driving the ``git`` command line.

    The ancestor is the ref (remote branches first, local branches when the
    repository has no remotes) whose merge-base with ``HEAD`` is closest to
    ``HEAD`` in commit count. Ties prefer ``main``, ``master`` and ``develop``
    and then sort by name so the choice is deterministic.
    """

    def __init__(self, root: Path, *, runner: GitRunner | None = None) -> None:
        """Create a git collaborator for the repository at ``root``.

        Args:
            root: Repository working tree root.
            runner: Optional command runner used to execute git commands. A
                default based on :func:`run_command` is used when omitted.
        """

        self._root = root
        self._runner = runner or self._default_runner

    def fetch_all(self) -> None:
        self._git("fetch", "--all", "--quiet")

    def branch_modifications(self) -> BranchModifications:
        """Return files modified since the merge-base with the nearest ancestor.

        Returns:
            BranchModifications: Ordered modified paths, ancestor, new files.

        Raises:
            ChangeSetResolutionError: If git fails or no ancestor can be found.
        """

        ancestor = self._resolve_ancestor()
        LOGGER.debug("resolved ancestor ref=%s merge_base=%s", ancestor.ref, ancestor.merge_base)
        modified: list[str] = []
        new_paths: set[str] = set()
        for status, path in self._diff_entries(ancestor.merge_base):
            if status == STATUS_DELETED:
                continue
            modified.append(path)
            if status in STATUS_ADDED:
                new_paths.add(path)
        for path in _nul_records(self._git("ls-files", "--others", "--exclude-standard", "-z")):
            modified.append(path)
            new_paths.add(path)
        return BranchModifications(
            modified_paths=tuple(dict.fromkeys(modified)),
            ancestor=ancestor.ref,
            new_paths=frozenset(new_paths),
        )

    def _resolve_ancestor(self) -> _AncestorCandidate:
        current = self._current_branch()
        candidates = [
            candidate
            for ref in self._candidate_refs(current)
            if (candidate := self._measure(ref)) is not None
        ]
        if not candidates:
            raise ChangeSetResolutionError(f"Unable to resolve a git ancestor for branch '{current or 'HEAD'}'")
        return min(candidates, key=_AncestorCandidate.sort_key)

    def _current_branch(self) -> str | None:
        lines = self._git("rev-parse", "--abbrev-ref", "HEAD")
        name = lines[0].strip() if lines else ""
        return None if name in {"", "HEAD"} else name

    def _candidate_refs(self, current: str | None) -> list[str]:
        # ``refs/remotes/origin/HEAD`` abbreviates to a bare ``origin``.
        remotes = [
            ref
            for ref in _clean(self._git("for-each-ref", "--format=%(refname:short)", "refs/remotes"))
            if "/" in ref and not ref.endswith(REMOTE_HEAD_SUFFIX)
        ]
        others = [ref for ref in remotes if not _tracks(ref, current)]
        if others:
            return others
        if remotes:
            return remotes
        return [ref for ref in _clean(self._git("for-each-ref", "--format=%(refname:short)", "refs/heads")) if ref != current]

    def _measure(self, ref: str) -> _AncestorCandidate | None:
        try:
            base_lines = self._git("merge-base", "HEAD", ref)
        except ChangeSetResolutionError:
            LOGGER.debug("skipping ref=%s without a common ancestor", ref)
            return None
        merge_base = next(iter(_clean(base_lines)), None)
        if merge_base is None:
            return None
        count_lines = self._git("rev-list", "--count", f"{merge_base}..HEAD")
        distance = int(count_lines[0].strip()) if count_lines else 0
        return _AncestorCandidate(ref=ref, merge_base=merge_base, distance=distance)

    def _diff_entries(self, merge_base: str) -> Iterator[tuple[str, str]]:
        """Yield ``(status, path)`` pairs changed since ``merge_base``.

        Paths are relative to the project root even when it is a subdirectory
        of the repository, and are emitted unquoted so non-ASCII names survive.
        """

        records = iter(
            _nul_records(self._git("diff", "--name-status", "--no-renames", "--relative", "-z", merge_base, "--"))
        )
        for status, path in zip(records, records):
            yield status[:1], path

    def _git(self, *args: str) -> list[str]:
        return self._runner([GIT_EXECUTABLE, *args], self._root)

    @staticmethod
    def _default_runner(cmd: Sequence[str], root: Path) -> list[str]:
        """Execute ``cmd`` returning stdout lines.

        Args:
            cmd: Git command to execute.
            root: Repository root directory.

        Returns:
            list[str]: Raw stdout lines produced by subprocess execution.

        Raises:
            ChangeSetResolutionError: If git is missing or exits non-zero.
        """

        try:
            cp = run_command(cmd, CommandOptions(cwd=root, check=True))
        except (SubprocessExecutionError, FileNotFoundError) as exc:
            raise ChangeSetResolutionError(str(exc)) from exc
        return (cp.stdout or "").splitlines()


def _clean(lines: Iterable[str]) -> list[str]:
    return [stripped for line in lines if (stripped := line.strip())]


def _nul_records(lines: Iterable[str]) -> list[str]:
    """Split ``-z`` output back into its NUL-terminated records."""

    return [record for record in "\n".join(lines).split("\0") if record]


def _tracks(ref: str, branch: str | None) -> bool:
    """Return ``True`` when remote ``ref`` is the remote copy of ``branch``."""

    if branch is None:
        return False
    _, _, remote_branch = ref.partition("/")
    return remote_branch == branch


__all__ = [
    "BranchModifications",
    "GitCli",
    "GitRunner",
    "VersionControl",
]
