# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for change-set resolution."""

from __future__ import annotations

from pathlib import Path

from phpstyle.config import StyleConfig
from phpstyle.diagnostics import PathExclusionPolicy
from phpstyle.discovery import ChangeSetResolver
from phpstyle.models import ChangeSet, ScanMode


def test_changed_mode_keeps_existing_whitelisted_php_files(project_root: Path, write_php, make_vcs) -> None:
    write_php("classes/Foo.php")
    write_php("src/Bar.php")
    write_php("classes/readme.md", "notes")
    write_php("other/Baz.php")
    vcs = make_vcs(
        ["classes/Foo.php", "classes/readme.md", "other/Baz.php", "src/Bar.php"],
        new=["src/Bar.php"],
    )

    changeset = ChangeSetResolver(project_root, StyleConfig(), vcs).resolve()

    assert changeset.mode is ScanMode.CHANGED
    assert changeset.paths == ("classes/Foo.php", "src/Bar.php")
    assert changeset.ancestor == "origin/main"
    assert changeset.is_new("src/Bar.php")
    assert not changeset.is_new("classes/Foo.php")
    assert vcs.fetches == 1


def test_deleted_file_is_dropped_and_empty_set_results(project_root: Path, make_vcs) -> None:
    vcs = make_vcs(["classes/Removed.php"])

    changeset = ChangeSetResolver(project_root, StyleConfig(), vcs).resolve()

    assert changeset.mode is ScanMode.EMPTY
    assert changeset.is_empty
    assert changeset.ancestor == "origin/main"


def test_missing_whitelisted_directory_does_not_match_by_prefix(project_root: Path, write_php, make_vcs) -> None:
    write_php("application/Thing.php")
    write_php("libraries/core/modules/Mod.php")
    config = StyleConfig(whitelisted_directories=("app", "libraries/core/modules"))
    vcs = make_vcs(["application/Thing.php", "libraries/core/modules/Mod.php"])

    changeset = ChangeSetResolver(project_root, config, vcs).resolve()

    assert changeset.paths == ("libraries/core/modules/Mod.php",)


def test_excluded_directories_are_skipped(project_root: Path, write_php, make_vcs) -> None:
    write_php("classes/Generated/Proxy.php")
    write_php("classes/Keep.php")
    config = StyleConfig(excluded_directories=("classes/Generated",))
    vcs = make_vcs(["classes/Generated/Proxy.php", "classes/Keep.php"])

    changeset = ChangeSetResolver(project_root, config, vcs).resolve()

    assert changeset.paths == ("classes/Keep.php",)


def test_explicit_exclusion_policy_overrides_config(project_root: Path, write_php, make_vcs) -> None:
    write_php("classes/Keep.php")
    write_php("tests/FooTest.php")
    resolver = ChangeSetResolver(
        project_root,
        StyleConfig(),
        make_vcs(["classes/Keep.php", "tests/FooTest.php"]),
        exclusions=PathExclusionPolicy(("tests",)),
    )

    assert resolver.resolve().paths == ("classes/Keep.php",)


def test_too_many_changes_fall_back_to_whitelisted_directories(project_root: Path, write_php, make_vcs) -> None:
    paths = [write_php(f"classes/File{index}.php") for index in range(3)]
    config = StyleConfig(max_changed_files=2)

    changeset = ChangeSetResolver(project_root, config, make_vcs(paths)).resolve()

    assert changeset.mode is ScanMode.WHITELIST
    assert changeset.paths == ("tests", "classes", "src")


def test_explicit_paths_skip_git_and_filters(project_root: Path, write_php, make_vcs) -> None:
    write_php("vendor/lib/Thing.php")
    write_php("classes/Foo.php")
    vcs = make_vcs([])

    changeset = ChangeSetResolver(project_root, StyleConfig(excluded_directories=("vendor",)), vcs).resolve(
        ["vendor/lib/Thing.php", "classes/Foo.php", "classes/Foo.php", "classes/Missing.php"],
    )

    assert changeset.mode is ScanMode.EXPLICIT
    assert changeset.paths == ("vendor/lib/Thing.php", "classes/Foo.php")
    assert vcs.fetches == 0
    assert vcs.queries == 0


def test_explicit_paths_that_do_not_exist_yield_empty_set(project_root: Path, make_vcs) -> None:
    changeset = ChangeSetResolver(project_root, StyleConfig(), make_vcs([])).resolve(["classes/Nope.php"])

    assert changeset.is_empty
    assert changeset.mode is ScanMode.EMPTY


def test_changeset_create_dedupes_and_limits_new_files() -> None:
    changeset = ChangeSet.create(ScanMode.CHANGED, ["a.php", "b.php", "a.php"], new_files=["b.php", "gone.php"])

    assert changeset.paths == ("a.php", "b.php")
    assert changeset.new_files == frozenset({"b.php"})
    assert len(changeset) == 2
