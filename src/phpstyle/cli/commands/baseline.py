# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command regenerating the SARB baseline."""

from __future__ import annotations

import typer

from ...diagnostics import DiagnosticNormalizer, SarbBaselineFilter
from ...engine import PhpcsEngine
from ...errors import PhpStyleError, ToolInvocationError
from ...models import ExitStatus
from ...pipeline import build_baseline
from ..shared import (
    BaselineOption,
    DebugOption,
    NoColorOption,
    NoEmojiOption,
    RootOption,
    abort,
    build_cli_logger,
    resolve_project,
)


def baseline(
    sarb_baseline: BaselineOption = None,
    root: RootOption = None,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    debug: DebugOption = False,
) -> None:
    """Scan the baseline directories and replace the SARB baseline with the findings."""

    logger = build_cli_logger(emoji=not no_emoji, debug=debug, no_color=no_color)
    try:
        project = resolve_project(root)
        config = project.config
        recorder = SarbBaselineFilter(
            project.root,
            config.baseline_path(project.root, sarb_baseline),
            DiagnosticNormalizer(project.root, config.container_prefixes),
        )
        logger.info(f"Creating baseline at {recorder.baseline_path}")
        build = build_baseline(project.root, config, PhpcsEngine(project.root, config), recorder)
    except ToolInvocationError as exc:
        abort(logger, f"{exc} (command: {exc.command})")
    except (PhpStyleError, FileNotFoundError) as exc:
        abort(logger, str(exc))
    logger.debug(f"baseline directories={','.join(build.directories)} returncode={build.result.returncode}")
    if build.result.output:
        logger.echo(build.result.output.rstrip())
    if not build.result.ok:
        logger.fail(f"Baseline creation failed with exit code {build.result.returncode}")
        raise typer.Exit(code=int(ExitStatus.FAILURE))
    logger.ok(f"Baseline written for {', '.join(build.directories)}")
    raise typer.Exit(code=int(ExitStatus.SUCCESS))


def register(app: typer.Typer) -> None:
    """Register the ``baseline`` command on ``app``."""

    app.command(name="baseline")(baseline)


__all__ = ["baseline", "register"]
