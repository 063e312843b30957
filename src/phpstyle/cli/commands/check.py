# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command checking the style of changed PHP files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...diagnostics import (
    BaselineFilter,
    DiagnosticNormalizer,
    PassthroughBaselineFilter,
    PathExclusionPolicy,
    SarbBaselineFilter,
)
from ...discovery import ChangeSetResolver, GitCli
from ...engine import PhpcsEngine
from ...errors import PhpStyleError, ToolInvocationError
from ...models import ChangeSet
from ...pipeline import StylePipeline
from ...reporting import ResultPresenter, RuleLinkTable
from ..shared import (
    BaselineOption,
    CLILogger,
    DebugOption,
    NoColorOption,
    NoEmojiOption,
    ProjectContext,
    RootOption,
    abort,
    build_cli_logger,
    resolve_project,
)

PathsArgument = Annotated[
    list[str] | None,
    typer.Argument(help="Force scanning of specific files or directories.", show_default=False),
]
RealAppRootOption = Annotated[
    str | None,
    typer.Option("--real-app-root", help="Project root as seen from the host, used for clickable links."),
]
PhpVersionOption = Annotated[
    str | None,
    typer.Option("--php-version", help="PHP version passed to phpcs as testVersion (defaults to the running php)."),
]
IgnoreBaselineOption = Annotated[
    bool,
    typer.Option("--ignore-baseline", help="Report every finding, ignoring the baseline."),
]
ExcludeOption = Annotated[
    list[str] | None,
    typer.Option(
        "--exclude",
        help="Directory prefix whose files and findings are skipped (repeatable, replaces the configured list).",
        show_default=False,
    ),
]


def _baseline_filter(
    project: ProjectContext,
    normalizer: DiagnosticNormalizer,
    *,
    sarb_baseline: Path | None,
    ignore_baseline: bool,
) -> BaselineFilter:
    if ignore_baseline:
        return PassthroughBaselineFilter(normalizer)
    return SarbBaselineFilter(project.root, project.config.baseline_path(project.root, sarb_baseline), normalizer)


def build_pipeline(
    project: ProjectContext,
    logger: CLILogger,
    presenter: ResultPresenter,
    *,
    sarb_baseline: Path | None = None,
    ignore_baseline: bool = False,
) -> StylePipeline:
    """Assemble the production pipeline for ``project``."""

    config = project.config
    exclusions = PathExclusionPolicy(config.excluded_directories)
    normalizer = DiagnosticNormalizer(project.root, config.container_prefixes)
    resolver = ChangeSetResolver(project.root, config, GitCli(project.root), exclusions=exclusions)

    def announce(changeset: ChangeSet) -> None:
        logger.debug(f"scan mode={changeset.mode.value} paths={len(changeset)} ancestor={changeset.ancestor}")
        presenter.render_changeset(changeset)

    return StylePipeline(
        resolver,
        PhpcsEngine(project.root, config),
        _baseline_filter(project, normalizer, sarb_baseline=sarb_baseline, ignore_baseline=ignore_baseline),
        exclusions,
        on_changeset=announce,
    )


def check(
    paths: PathsArgument = None,
    sarb_baseline: BaselineOption = None,
    ignore_baseline: IgnoreBaselineOption = False,
    exclude: ExcludeOption = None,
    real_app_root: RealAppRootOption = None,
    php_version: PhpVersionOption = None,
    root: RootOption = None,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    debug: DebugOption = False,
) -> None:
    """Check PHP code style in files changed since the git ancestor.

    Raises:
        typer.Exit: With 0 when no findings remain, 1 when findings remain and
            2 when a tool or git invocation failed.
    """

    logger = build_cli_logger(emoji=not no_emoji, debug=debug, no_color=no_color)
    try:
        project = resolve_project(
            root,
            real_app_root=real_app_root,
            php_version=php_version,
            excluded_directories=tuple(exclude) if exclude else None,
        )
        presenter = ResultPresenter(
            logger.console,
            real_app_root=project.real_app_root,
            links=RuleLinkTable(real_app_root=project.config.real_app_root),
            use_emoji=logger.use_emoji,
            use_color=logger.use_color,
        )
        pipeline = build_pipeline(
            project,
            logger,
            presenter,
            sarb_baseline=sarb_baseline,
            ignore_baseline=ignore_baseline,
        )
        result = pipeline.run(tuple(paths or ()))
    except ToolInvocationError as exc:
        abort(logger, f"{exc} (command: {exc.command})")
    except (PhpStyleError, FileNotFoundError) as exc:
        abort(logger, str(exc))
    if result.report is not None:
        logger.debug(f'lint engine command="{result.report.command_line}" returncode={result.report.returncode}')
    raise typer.Exit(code=int(presenter.render(result)))


def register(app: typer.Typer) -> None:
    """Register the ``check`` command on ``app``."""

    app.command(name="check")(check)


__all__ = ["build_pipeline", "check", "register"]
