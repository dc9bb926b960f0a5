# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the run-once command cache.
"""

import logging

import allure
import pytest

from sysinventory.utils.core import InventoryWorkspace
from sysinventory.utils.system import cache as src
from sysinventory.utils.system.cache import build_sources

from .conftest import RPM_QA_OUTPUT, FakeRunner, default_outputs


@allure.title("Each source runs at most once per run")
def test_sources_run_once(make_cache, fake_runner):
    cache = make_cache()
    first = cache.get(src.FLATPAK_APPS)
    second = cache.get(src.FLATPAK_APPS)

    assert first is second
    assert fake_runner.count(("flatpak", "list", "--app")) == 1


def test_load_base(make_cache, fake_runner):
    cache = make_cache()
    results = cache.load_base()

    assert list(results) == list(src.BASE_SOURCES)
    assert cache.loaded == list(src.BASE_SOURCES)
    assert len(fake_runner.calls) == 3


def test_installed_header_is_dropped(make_cache):
    installed = make_cache().get(src.DNF_INSTALLED)
    assert installed.count == 8
    assert not any(line.startswith("Installed packages") for line in installed.lines)


@allure.title("Failed package listing falls back to rpm, sorted")
def test_installed_falls_back_to_rpm(make_cache, caplog):
    runner = FakeRunner(failing=[("dnf5", "list")])
    caplog.set_level(logging.WARNING)

    installed = make_cache(runner=runner).get(src.DNF_INSTALLED)

    assert installed.success
    assert installed.lines == sorted(RPM_QA_OUTPUT.strip().splitlines())
    assert runner.count(("rpm", "-qa")) == 1
    assert any("using rpm as fallback" in message for message in caplog.messages)


def test_installed_fallback_failure_is_empty_and_failed(make_cache):
    runner = FakeRunner(failing=[("dnf5", "list"), ("rpm",)])
    installed = make_cache(runner=runner).get(src.DNF_INSTALLED)

    assert installed.failed
    assert installed.count == 0


def test_user_installed_failure_has_no_fallback(make_cache):
    runner = FakeRunner(failing=[("dnf5", "repoquery")])
    user = make_cache(runner=runner).get(src.DNF_USERINSTALLED)

    assert user.failed
    assert user.stdout == ""
    assert runner.count(("rpm",)) == 0


def test_missing_tool_is_unavailable(make_cache):
    runner = FakeRunner(missing={"flatpak", "snap"})
    cache = make_cache(runner=runner)

    assert not cache.get(src.FLATPAK_APPS).available
    assert not cache.get(src.SNAP_LIST).available
    assert cache.get(src.FLATPAK_APPS).count == 0


def test_sorted_sources(make_cache):
    table = make_cache().get(src.DNF_USERINSTALLED_TABLE)
    assert table.lines == sorted(table.lines)
    assert table.lines[0].startswith("firefox")


def test_storage_size_skipped_for_missing_path(make_cache, fake_runner, tmp_path):
    result = make_cache().get(src.DU_FLATPAK_USER)

    assert result.failed
    assert result.stdout == ""
    assert fake_runner.count(("du", "-sh", str(tmp_path / "home" / ".var" / "app"))) == 0


def test_partial_du_output_is_kept(tmp_path, desktop_dirs):
    home = tmp_path / "home"
    (home / ".var" / "app").mkdir(parents=True)
    outputs = default_outputs()
    runner = FakeRunner(outputs=outputs, failing=[("du",)])
    cache = src.CommandCache("dnf5", runner=runner, desktop_dirs=desktop_dirs, home=home)

    result = cache.get(src.DU_FLATPAK_USER)

    assert result.failed
    assert runner.count(("du", "-sh", str(home / ".var" / "app"))) == 1


def test_raw_output_is_mirrored_to_workspace(make_cache, tmp_path):
    with InventoryWorkspace(base_dir=str(tmp_path)) as workspace:
        cache = make_cache(workspace=workspace)
        cache.get(src.SNAP_LIST)
        stored = (workspace.path / "snap_list.txt").read_text(encoding="utf-8")
        assert stored.startswith("Name")


def test_desktop_entries_source(make_cache, fake_runner):
    entries = make_cache().get(src.DESKTOP_ENTRIES)
    assert len(entries) == 3
    assert fake_runner.calls == []


def test_unknown_source(make_cache):
    with pytest.raises(KeyError):
        make_cache().get("not_a_source")


@pytest.mark.parametrize(
    "package_manager, userinstalled, table_format",
    [
        (
            "dnf5",
            ("dnf5", "repoquery", "--userinstalled"),
            "%-37{name} | %-26{version} | %{reponame}\n",
        ),
        (
            "dnf",
            ("dnf", "repoquery", "--userinstalled", "--qf", "%{name}"),
            "%-37{name} | %-26{version} | %{reponame}",
        ),
    ],
)
def test_package_manager_specific_commands(tmp_path, package_manager, userinstalled, table_format):
    sources = build_sources(package_manager, home=tmp_path)

    assert sources[src.DNF_USERINSTALLED].command == userinstalled
    assert sources[src.DNF_USERINSTALLED_TABLE].command[-1] == table_format
    assert sources[src.DNF_INSTALLED].command == (package_manager, "list", "--installed")
    assert sources[src.DU_FLATPAK_USER].command == ("du", "-sh", str(tmp_path / ".var" / "app"))


def test_describe_lists_commands(make_cache):
    described = make_cache().describe([src.DNF_INSTALLED, src.DESKTOP_ENTRIES])
    assert described[0].startswith("dnf_installed: dnf5 list --installed (fallback: rpm -qa")
    assert described[1].startswith("desktop_entries: scan *.desktop in ")
