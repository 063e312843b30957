# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console rendering for style-check results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.logging import emoji
from ..models import ChangeSet, Diagnostic, ExitStatus, ScanMode
from ..pipeline import PipelineOutcome, PipelineResult
from .links import RuleLinkTable, ellipsize, make_path_link

FILE_COLUMN_BUDGET: Final[int] = 100
MESSAGE_COLUMN_BUDGET: Final[int] = 50
FILE_PREVIEW_LIMIT: Final[int] = 10
TABLE_HEADERS: Final[tuple[str, str, str]] = ("File", "(Shortened) Type", "Message")
NOTHING_TO_CHECK_MESSAGE: Final[str] = "Style check passed - No relevant PHP files modified from parent"
PASSED_MESSAGE: Final[str] = "Style check passed!"
THUMBS_UP_ASCII: Final[str] = """\
░░░░░░░░░░░░▄▄░░░░░░░░░
░░░░░░░░░░░█░░█░░░░░░░░
░░░░░░░░░░░█░░█░░░░░░░░
░░░░░░░░░░█░░░█░░░░░░░░
░░░░░░░░░█░░░░█░░░░░░░░
███████▄▄█░░░░░██████▄░
▓▓▓▓▓▓█░░░░░░░░░░░░░░█░
▓▓▓▓▓▓█░░░░░░░░░░░░░░█░
▓▓▓▓▓▓█░░░░░░░░░░░░░░█░
▓▓▓▓▓▓█░░░░░░░░░░░░░░█░
▓▓▓▓▓▓█░░░░░░░░░░░░░░█░
▓▓▓▓▓▓█████░░░░░░░░░█░░
██████▀░░░░▀▀██████▀░░░"""


def exit_status_for(diagnostics: Sequence[Diagnostic]) -> ExitStatus:
    """Return ``SUCCESS`` when no diagnostics survived, ``FAILURE`` otherwise."""

    return ExitStatus.FAILURE if diagnostics else ExitStatus.SUCCESS


def describe_changeset(changeset: ChangeSet) -> list[str]:
    """Return the summary lines printed before the engine runs.

    Args:
        changeset: Resolved change set.

    Returns:
        list[str]: Lines describing what is about to be checked.
    """

    if changeset.is_empty:
        return []
    if changeset.mode is ScanMode.EXPLICIT:
        return [f"Checking style for specified paths: {', '.join(changeset.paths)}"]
    if changeset.mode is ScanMode.WHITELIST:
        return [
            f"Changes since git ancestor {changeset.ancestor} exceed the file limit; "
            f"checking whitelisted directories: {', '.join(changeset.paths)}",
        ]
    lines = [
        f"Checking style in changes since git ancestor: {changeset.ancestor}",
        "",
        "Checking style for files:",
    ]
    for path in changeset.paths[:FILE_PREVIEW_LIMIT]:
        marker = " (NEW)" if changeset.is_new(path) else ""
        lines.append(f" -{marker} {path}")
    remaining = len(changeset) - FILE_PREVIEW_LIMIT
    if remaining > 0:
        lines.append(f"(And {remaining} more files...)")
    return lines


class ResultPresenter:
    """Render change-set summaries, the diagnostics table and the final verdict."""

    def __init__(
        self,
        console: Console,
        *,
        real_app_root: str,
        links: RuleLinkTable,
        use_emoji: bool = True,
        use_color: bool = True,
    ) -> None:
        """Bind the presenter to an output console.

        Args:
            console: Console receiving every rendered line.
            real_app_root: Host path used for ``file://`` links.
            links: Rule-identifier link table.
            use_emoji: Prefix verdict lines with emoji.
            use_color: Use a heavier table border and coloured verdicts.
        """

        self._console = console
        self._real_app_root = real_app_root
        self._links = links
        self._use_emoji = use_emoji
        self._use_color = use_color

    def render_changeset(self, changeset: ChangeSet) -> None:
        lines = describe_changeset(changeset)
        if not lines:
            return
        for line in lines:
            self._console.print(Text(line))
        self._console.print()

    def build_table(self, diagnostics: Sequence[Diagnostic]) -> Table:
        table = Table(box=box.SIMPLE_HEAVY if self._use_color else box.SIMPLE)
        for header in TABLE_HEADERS:
            table.add_column(header, overflow="fold")
        for diagnostic in diagnostics:
            location = make_path_link(
                diagnostic.file,
                diagnostic.line,
                self._real_app_root,
                max_width=FILE_COLUMN_BUDGET,
            )
            table.add_row(
                location.to_rich(),
                self._links.link(diagnostic.source).to_rich(),
                Text(ellipsize(diagnostic.message, MESSAGE_COLUMN_BUDGET)),
            )
        return table

    def render(self, result: PipelineResult) -> ExitStatus:
        """Print the verdict for ``result`` and return the matching exit status."""

        match result.outcome:
            case PipelineOutcome.NOTHING_TO_CHECK:
                self._verdict("✅", NOTHING_TO_CHECK_MESSAGE, "green")
            case PipelineOutcome.PASSED:
                self._verdict("✅", PASSED_MESSAGE, "green")
                self._console.print(Text(THUMBS_UP_ASCII))
            case PipelineOutcome.FAILED:
                self._console.print(self.build_table(result.diagnostics))
                count = len(result.diagnostics)
                self._verdict("❌", f"Style check failed: {count} issue{'s' if count != 1 else ''} found", "red")
        return exit_status_for(result.diagnostics)

    def _verdict(self, symbol: str, message: str, style: str) -> None:
        prefix = emoji(f"{symbol} ", self._use_emoji)
        text = Text(f"{prefix}{message}")
        if self._use_color:
            text.stylize(f"bold {style}")
        self._console.print(text)


__all__ = [
    "FILE_PREVIEW_LIMIT",
    "NOTHING_TO_CHECK_MESSAGE",
    "PASSED_MESSAGE",
    "ResultPresenter",
    "THUMBS_UP_ASCII",
    "describe_changeset",
    "exit_status_for",
]
