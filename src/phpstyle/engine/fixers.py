# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Automatic style fixers (php-cs-fixer and phpcbf)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..core.runtime.process import CommandOptions, CommandRunner, run_command, tool_environment
from ..errors import FixTargetError
from .php import LENIENT_ERROR_REPORTING, PHP_EXECUTABLE

CS_FIXER_LABEL: Final[str] = "PHP CS Fixer"
PHPCBF_LABEL: Final[str] = "Code Sniffer (phpcbf)"
CS_FIXER_BINARY: Final[str] = "vendor/bin/php-cs-fixer"
PHPCBF_BINARY: Final[str] = "vendor/bin/phpcbf"
CS_FIXER_CONFIG: Final[str] = ".php-cs-fixer.dist.php"
PHPCBF_STANDARD: Final[str] = "PlotBox"
#: Sniffs whose automatic fixes change behaviour and must be applied by hand.
PHPCBF_EXCLUSIONS: Final[tuple[str, ...]] = (
    "SlevomatCodingStandard.Operators.DisallowEqualOperators",
    "Squiz.Commenting.PostStatementComment",
)


@dataclass(frozen=True, slots=True)
class FixCommand:
    label: str
    argv: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class FixOutcome:
    label: str
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class FixRunner:
    """Run every installed fixer against one file or directory."""

    def __init__(self, root: Path, *, runner: CommandRunner = run_command) -> None:
        self._root = root
        self._runner = runner

    def resolve_target(self, target: str) -> Path:
        """Return ``target`` as an absolute path under the project root.

        Raises:
            FixTargetError: If the resolved path does not exist.
        """

        candidate = Path(target)
        resolved = candidate if candidate.is_absolute() else self._root / candidate
        if not resolved.exists():
            raise FixTargetError(f"File at path '{resolved}' did not exist. Check path")
        return resolved

    def commands(self, target: Path) -> list[FixCommand]:
        """Return fix commands for the fixers installed under ``vendor/bin``."""

        commands: list[FixCommand] = []
        if (self._root / CS_FIXER_BINARY).exists():
            config_file = self._root / CS_FIXER_CONFIG
            config_flag = [f"--config={config_file}"] if config_file.exists() else []
            commands.append(
                FixCommand(CS_FIXER_LABEL, (PHP_EXECUTABLE, CS_FIXER_BINARY, "fix", *config_flag, str(target))),
            )
        if (self._root / PHPCBF_BINARY).exists():
            commands.append(
                FixCommand(
                    PHPCBF_LABEL,
                    (
                        PHP_EXECUTABLE,
                        "-d",
                        f"error_reporting={LENIENT_ERROR_REPORTING}",
                        PHPCBF_BINARY,
                        f"--standard={PHPCBF_STANDARD}",
                        f"--exclude={','.join(PHPCBF_EXCLUSIONS)}",
                        str(target),
                    ),
                ),
            )
        return commands

    def run(self, command: FixCommand) -> FixOutcome:
        completed = self._runner(command.argv, CommandOptions(cwd=self._root, env=tool_environment(), check=False))
        return FixOutcome(command.label, completed.returncode, completed.stdout or "")


def summarize_failures(outcomes: Sequence[FixOutcome]) -> str:
    """Return a ``label: code`` summary covering every fixer outcome."""

    return ", ".join(f"{outcome.label}: {outcome.returncode}" for outcome in outcomes)


__all__ = [
    "FixCommand",
    "FixOutcome",
    "FixRunner",
    "summarize_failures",
]
