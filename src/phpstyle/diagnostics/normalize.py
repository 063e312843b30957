# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Convert raw lint-engine JSON into canonical :class:`Diagnostic` records.

Two document shapes are understood:

* SARB output (baseline filtering active): a top-level array of findings,
  each carrying the phpcs payload under ``original_tool_details``.
* phpcs ``--report=json`` output (baseline bypassed): ``files`` maps each
  path to a ``messages`` list.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from ..config import DEFAULT_CONTAINER_PREFIXES
from ..errors import DiagnosticParseError
from ..models import Diagnostic
from ..severity import Severity

FILES_KEY: Final[str] = "files"
MESSAGES_KEY: Final[str] = "messages"
DETAILS_KEY: Final[str] = "original_tool_details"


def strip_prefixes(path: str, prefixes: Sequence[str]) -> str:
    """Remove the first matching prefix from ``path``.

    Args:
        path: Path reported by the lint engine.
        prefixes: Candidate prefixes in priority order.

    Returns:
        str: ``path`` without its first matching prefix, or unchanged.
    """

    for prefix in prefixes:
        if prefix and path.startswith(prefix):
            return path[len(prefix) :]
    return path


class DiagnosticNormalizer:
    """Translate engine output into project-relative diagnostics.

    Every raw finding becomes exactly one diagnostic; nothing is filtered and
    the input order is preserved.
    """

    def __init__(self, root: Path, container_prefixes: Sequence[str] = DEFAULT_CONTAINER_PREFIXES) -> None:
        """Create a normaliser for the project at ``root``.

        Args:
            root: Resolved project root, stripped after the container prefixes.
            container_prefixes: Sandbox mount points stripped first.
        """

        root_prefix = f"{root.as_posix().rstrip('/')}/"
        self._prefixes: tuple[str, ...] = (*container_prefixes, root_prefix)

    @property
    def prefixes(self) -> tuple[str, ...]:
        return self._prefixes

    def relativize(self, path: str) -> str:
        return strip_prefixes(path, self._prefixes)

    def parse(self, raw_output: str, *, ignore_baseline: bool) -> list[Diagnostic]:
        """Decode ``raw_output`` and normalise it.

        Args:
            raw_output: JSON text produced by phpcs or SARB.
            ignore_baseline: ``True`` when the text is raw phpcs output.

        Returns:
            list[Diagnostic]: Normalised diagnostics.

        Raises:
            DiagnosticParseError: If the text is not valid JSON of the expected shape.
        """

        try:
            document = json.loads(raw_output)
        except json.JSONDecodeError as exc:
            raise DiagnosticParseError(f"Lint output is not valid JSON: {exc}") from exc
        return self.normalize(document, ignore_baseline=ignore_baseline)

    def normalize(self, document: object, *, ignore_baseline: bool) -> list[Diagnostic]:
        """Normalise an already decoded JSON document."""

        entries = self._phpcs_entries(document) if ignore_baseline else self._sarb_entries(document)
        try:
            return [self._build(entry) for entry in entries]
        except ValidationError as exc:
            raise DiagnosticParseError(f"Lint output contained an invalid finding: {exc}") from exc

    def _build(self, fields: dict[str, Any]) -> Diagnostic:
        file = fields.get("file")
        if isinstance(file, str):
            fields["file"] = self.relativize(file)
        return Diagnostic.model_validate(fields)

    @staticmethod
    def _sarb_entries(document: object) -> Iterator[dict[str, Any]]:
        if not isinstance(document, list):
            raise DiagnosticParseError("Expected a JSON array of baseline-filtered findings")
        for entry in document:
            if not isinstance(entry, Mapping):
                raise DiagnosticParseError(f"Unexpected finding entry: {entry!r}")
            details = entry.get(DETAILS_KEY)
            if not isinstance(details, Mapping):
                details = {}
            source = details.get("source") or entry.get("type")
            yield {
                "file": entry.get("file"),
                "line": details.get("line", entry.get("line")),
                "column": details.get("column"),
                "source": source,
                "message": details.get("message", entry.get("message")),
                "severity": Severity.from_raw(details.get("type"), default=Severity.from_raw(entry.get("severity"))),
                "type": entry.get("type") or source,
                "fixable": bool(details.get("fixable", False)),
            }

    @staticmethod
    def _phpcs_entries(document: object) -> Iterator[dict[str, Any]]:
        if not isinstance(document, Mapping) or not isinstance(document.get(FILES_KEY), Mapping):
            raise DiagnosticParseError("Expected a phpcs JSON report with a 'files' table")
        for file, details in document[FILES_KEY].items():
            messages = details.get(MESSAGES_KEY, []) if isinstance(details, Mapping) else None
            if not isinstance(messages, list):
                raise DiagnosticParseError(f"Unexpected phpcs entry for {file!r}")
            for message in messages:
                if not isinstance(message, Mapping):
                    raise DiagnosticParseError(f"Unexpected phpcs message for {file!r}: {message!r}")
                yield {
                    "file": file,
                    "line": message.get("line"),
                    "column": message.get("column"),
                    "source": message.get("source"),
                    "message": message.get("message"),
                    "severity": Severity.from_raw(message.get("type")),
                    "type": message.get("source"),
                    "fixable": bool(message.get("fixable", False)),
                }


__all__ = ["DiagnosticNormalizer", "strip_prefixes"]
