# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the phpstyle commands."""

from __future__ import annotations

import typer

from .commands import register_commands

app = typer.Typer(
    name="phpstyle",
    help="Incremental PHP code-style checks for git branches.",
    no_args_is_help=True,
    add_completion=False,
)
register_commands(app)


def main() -> None:
    app()


__all__ = ["app", "main"]
