# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, project context, fatal errors)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Final, NoReturn

import typer
from rich.console import Console
from rich.text import Text

from ..config import StyleConfig, load_config
from ..core.console import detect_tty, get_console_manager
from ..core.logging import fail as core_fail
from ..core.logging import info as core_info
from ..core.logging import ok as core_ok
from ..core.logging import warn as core_warn
from ..models import ExitStatus

DEBUG_LOG_FORMAT: Final[str] = "%(name)s: %(message)s"

RootOption = Annotated[
    Path | None,
    typer.Option("--root", help="Project root (defaults to the current directory).", file_okay=False),
]
BaselineOption = Annotated[
    Path | None,
    typer.Option("--sarb-baseline", help="Path to the SARB baseline file."),
]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Echo executed commands and debug records.")]


@dataclass(slots=True)
class CLILogger:
    """Adapter around the console helpers respecting CLI emoji and colour flags."""

    console: Console
    use_emoji: bool
    use_color: bool
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def echo(self, message: str) -> None:
        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        ``key=value`` pairs are highlighted; ``command`` values stand out so
        executed tool invocations are easy to copy.

        Args:
            message: Debug payload rendered with simple highlighting.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            text.append(raw_value, style="bold blue" if key in {"command", "cmd"} else "bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` bound to a console matching the CLI flags.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a shared Rich console.
    """

    use_color = not no_color and detect_tty()
    console = get_console_manager().get(color=use_color, emoji=emoji)
    if debug:
        logging.basicConfig(level=logging.DEBUG, format=DEBUG_LOG_FORMAT)
    return CLILogger(console=console, use_emoji=emoji, use_color=use_color, debug_enabled=debug)


@dataclass(frozen=True, slots=True)
class ProjectContext:
    """Project root and configuration resolved for one command invocation."""

    root: Path
    config: StyleConfig

    @property
    def real_app_root(self) -> str:
        return self.config.real_app_root or str(self.root)


def resolve_project(root: Path | None, **overrides: Any) -> ProjectContext:
    """Resolve ``root`` (or the working directory) and load its configuration.

    Args:
        root: Project root supplied on the command line.
        **overrides: Command-line values replacing configured ones; ``None``
            values leave the configuration untouched.

    Raises:
        ConfigError: If the configuration file or an override is invalid.
    """

    resolved = (root or Path.cwd()).resolve()
    return ProjectContext(root=resolved, config=load_config(resolved).with_overrides(**overrides))


def abort(logger: CLILogger, message: str) -> NoReturn:
    """Report a fatal error on stderr and exit with the invalid status."""

    logger.fail(message)
    raise typer.Exit(code=int(ExitStatus.INVALID))


__all__ = [
    "BaselineOption",
    "CLILogger",
    "DebugOption",
    "NoColorOption",
    "NoEmojiOption",
    "ProjectContext",
    "RootOption",
    "abort",
    "build_cli_logger",
    "resolve_project",
]
