# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import baseline, check, fix

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register every built-in command on ``app``.

    Args:
        app: Typer application receiving the command registrations.
    """

    check.register(app)
    baseline.register(app)
    fix.register(app)
