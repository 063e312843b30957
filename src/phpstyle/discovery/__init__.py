# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Change-set discovery backed by git."""

from __future__ import annotations

from .changeset import ChangeSetResolver
from .git import BranchModifications, GitCli, GitRunner, VersionControl

__all__ = [
    "BranchModifications",
    "ChangeSetResolver",
    "GitCli",
    "GitRunner",
    "VersionControl",
]
