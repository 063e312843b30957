# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Terminal hyperlinks for file locations and rule documentation.

Rule identifiers are dispatched through an ordered table of
``(predicate, formatter)`` pairs; the first matching predicate wins and
identifiers no predicate claims fall through to a plain-text formatter.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from rich.style import Style
from rich.text import Text

RuleParts = tuple[str, ...]
RulePredicate = Callable[[RuleParts], bool]

ELLIPSIS: Final[str] = "..."
MIN_RULE_SEGMENTS: Final[int] = 4
CONTAINER_APP_PREFIX: Final[str] = "/app/"
UI_PATH_PREFIXES: Final[tuple[str, ...]] = ("vue2/src/", "classes/")
CODE_SNIFFER_RULESETS: Final[frozenset[str]] = frozenset(
    {"Squiz", "PSR1", "Generic", "PEAR", "MySource", "PSR2", "PSR12", "Zend"},
)
SLEVOMAT_README_URL: Final[str] = "https://github.com/slevomat/coding-standard?tab=readme-ov-file#:~:text={anchor}"
CODE_SNIFFER_SNIFF_URL: Final[str] = (
    "https://github.com/squizlabs/PHP_CodeSniffer/blob/master/src/Standards/{standard}/Sniffs/{category}/{sniff}Sniff.php"
)
MEDIAWIKI_SNIFF_URL: Final[str] = (
    "https://github.com/wikimedia/mediawiki-tools-codesniffer/blob/master/MediaWiki/Sniffs/{category}/{sniff}Sniff.php"
)
PLOTBOX_SNIFF_PATH: Final[str] = "vendor/plotbox-io/standards/src/PlotBox/Sniffs/{category}/{sniff}Sniff.php"


@dataclass(frozen=True, slots=True)
class LinkedText:
    """Display text with an optional hyperlink target."""

    text: str
    url: str | None = None

    def to_rich(self) -> Text:
        if self.url is None:
            return Text(self.text)
        return Text(self.text, style=Style(link=self.url))


RuleFormatter = Callable[[RuleParts, "str | None"], LinkedText]


def ellipsize(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` characters followed by ``...`` when longer."""

    return f"{text[:max_chars]}{ELLIPSIS}" if len(text) > max_chars else text


def _short_name(parts: RuleParts) -> str:
    return f"{parts[2]}.{parts[3]}"


def _slevomat(parts: RuleParts, _: str | None) -> LinkedText:
    return LinkedText(_short_name(parts), SLEVOMAT_README_URL.format(anchor=".".join(parts[:3])))


def _code_sniffer(parts: RuleParts, _: str | None) -> LinkedText:
    url = CODE_SNIFFER_SNIFF_URL.format(standard=parts[0], category=parts[1], sniff=parts[2])
    return LinkedText(_short_name(parts), url)


def _mediawiki(parts: RuleParts, _: str | None) -> LinkedText:
    return LinkedText(_short_name(parts), MEDIAWIKI_SNIFF_URL.format(category=parts[1], sniff=parts[2]))


def _plotbox(parts: RuleParts, real_app_root: str | None) -> LinkedText:
    relative = PLOTBOX_SNIFF_PATH.format(category=parts[1], sniff=parts[2])
    if not real_app_root:
        return LinkedText(relative)
    return LinkedText(_short_name(parts), f"file://{real_app_root}/{relative}")


def _plain(parts: RuleParts, _: str | None) -> LinkedText:
    return LinkedText(_short_name(parts))


DEFAULT_RULE_LINKS: Final[tuple[tuple[RulePredicate, RuleFormatter], ...]] = (
    (lambda parts: parts[0].startswith("Slevomat"), _slevomat),
    (lambda parts: parts[0] in CODE_SNIFFER_RULESETS, _code_sniffer),
    (lambda parts: parts[0].startswith("MediaWiki"), _mediawiki),
    (lambda parts: parts[0].startswith("PlotBox"), _plotbox),
)


@dataclass(frozen=True, slots=True)
class RuleLinkTable:
    """Ordered rule-identifier dispatch built once per run.

    Attributes:
        real_app_root: Host path of the project, used for ``file://`` links.
        rules: ``(predicate, formatter)`` pairs evaluated in order.
        fallback: Formatter applied when no predicate matches.
    """

    real_app_root: str | None = None
    rules: tuple[tuple[RulePredicate, RuleFormatter], ...] = DEFAULT_RULE_LINKS
    fallback: RuleFormatter = _plain

    def link(self, identifier: str) -> LinkedText:
        """Return the shortened, possibly linked, form of ``identifier``.

        Identifiers with fewer than four dotted segments are returned verbatim.
        """

        parts = tuple(identifier.split("."))
        if len(parts) < MIN_RULE_SEGMENTS:
            return LinkedText(identifier)
        for predicate, formatter in self.rules:
            if predicate(parts):
                return formatter(parts, self.real_app_root)
        return self.fallback(parts, self.real_app_root)


def make_path_link(file: str, line: int, real_app_root: str, *, max_width: int | None = None) -> LinkedText:
    """Return a ``file://`` link to ``file:line`` on the developer host.

    The link target keeps the full project-relative path; the display text
    drops the ``vue2/src/`` and ``classes/`` prefixes to save width.

    Args:
        file: Project-relative (or container ``/app/``) path.
        line: One-based line number.
        real_app_root: Project root as seen from the host.
        max_width: Optional display budget in characters.

    Returns:
        LinkedText: Display text and link target.
    """

    relative = file.removeprefix(CONTAINER_APP_PREFIX)
    display = file
    for prefix in UI_PATH_PREFIXES:
        display = display.removeprefix(prefix)
    text = f"{display}:{line}"
    if max_width is not None:
        text = ellipsize(text, max_width)
    return LinkedText(text, f"file://{real_app_root.rstrip('/')}/{relative}:{line}")


__all__ = [
    "CODE_SNIFFER_RULESETS",
    "DEFAULT_RULE_LINKS",
    "LinkedText",
    "RuleLinkTable",
    "ellipsize",
    "make_path_link",
]
