# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command applying the automatic style fixers to a path."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from ...engine import FixCommand, FixOutcome, FixRunner, summarize_failures
from ...errors import PhpStyleError
from ...models import ExitStatus
from ..shared import (
    DebugOption,
    NoColorOption,
    NoEmojiOption,
    RootOption,
    abort,
    build_cli_logger,
    resolve_project,
)

TargetArgument = Annotated[
    str,
    typer.Argument(help="File or directory to fix (relative to the project root, or absolute)."),
]


def _run_with_spinner(runner: FixRunner, command: FixCommand, console: Console) -> FixOutcome:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    with progress:
        progress.add_task(command.label, total=None)
        return runner.run(command)


def fix(
    target: TargetArgument,
    root: RootOption = None,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    debug: DebugOption = False,
) -> None:
    """Automatically fix code style for a PHP file or a directory of PHP files."""

    logger = build_cli_logger(emoji=not no_emoji, debug=debug, no_color=no_color)
    try:
        project = resolve_project(root)
        runner = FixRunner(project.root)
        resolved = runner.resolve_target(target)
        commands = runner.commands(resolved)
        if not commands:
            logger.warn("No style fixers available. Ensure php-cs-fixer or phpcbf is installed.")
            raise typer.Exit(code=int(ExitStatus.SUCCESS))
        outcomes: list[FixOutcome] = []
        for command in commands:
            logger.debug(f'fixer label="{command.label}" command="{" ".join(command.argv)}"')
            outcome = _run_with_spinner(runner, command, logger.console)
            outcomes.append(outcome)
            if outcome.ok:
                logger.ok(command.label)
            else:
                logger.fail(f"{command.label} exited with {outcome.returncode}")
                if outcome.output.strip():
                    logger.echo(outcome.output.rstrip())
    except (PhpStyleError, FileNotFoundError) as exc:
        abort(logger, str(exc))
    if any(not outcome.ok for outcome in outcomes):
        logger.fail(f"Style fixers reported failures: {summarize_failures(outcomes)}")
        raise typer.Exit(code=int(ExitStatus.FAILURE))
    logger.ok("Style fixes applied")
    raise typer.Exit(code=int(ExitStatus.SUCCESS))


def register(app: typer.Typer) -> None:
    """Register the ``fix`` command on ``app``."""

    app.command(name="fix")(fix)


__all__ = ["fix", "register"]
