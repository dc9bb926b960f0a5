# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Tests for preflight checks: distribution and package manager detection.
"""

import logging

import allure
import pytest

from sysinventory.utils.core.errors import PreflightError
from sysinventory.utils.system import preflight
from sysinventory.utils.system.preflight import (
    detect_package_manager,
    parse_os_release,
    read_os_release,
    run_preflight,
)


def test_parse_os_release_unquotes_values():
    parsed = parse_os_release('# comment\nNAME="Fedora Linux"\nID=fedora\nVERSION_ID=39\nEMPTY=""\n\nbroken line\n')
    assert parsed == {"NAME": "Fedora Linux", "ID": "fedora", "VERSION_ID": "39", "EMPTY": ""}


def test_read_os_release(os_release_file):
    parsed = read_os_release(str(os_release_file))
    assert parsed["ID"] == "fedora"
    assert parsed["PRETTY_NAME"] == "Fedora Linux 39 (KDE Plasma)"


@allure.title("Missing os-release aborts the run")
def test_missing_os_release(tmp_path):
    with pytest.raises(PreflightError, match="not found"):
        read_os_release(str(tmp_path / "os-release"))


@pytest.mark.parametrize(
    "installed, expected",
    [
        ({"dnf5", "dnf"}, "dnf5"),
        ({"dnf"}, "dnf"),
        ({"dnf5"}, "dnf5"),
    ],
)
def test_detect_package_manager_prefers_dnf5(monkeypatch, installed, expected):
    monkeypatch.setattr(preflight, "check_command_available", lambda name: name in installed)
    assert detect_package_manager() == expected


@allure.title("No DNF-compatible package manager aborts the run")
def test_no_package_manager(monkeypatch):
    monkeypatch.setattr(preflight, "check_command_available", lambda name: False)
    with pytest.raises(PreflightError, match="Neither dnf5 nor dnf found"):
        detect_package_manager()


def test_non_fedora_warns_and_continues(tmp_path, monkeypatch, caplog):
    path = tmp_path / "os-release"
    path.write_text('NAME="Debian GNU/Linux"\nID=debian\n', encoding="utf-8")
    monkeypatch.setattr(preflight, "check_command_available", lambda name: name == "dnf")
    caplog.set_level(logging.INFO, logger="sysinventory.utils.system.preflight")

    os_release, package_manager = run_preflight(str(path))

    assert os_release["ID"] == "debian"
    assert package_manager == "dnf"
    warnings = [record.message for record in caplog.records if record.levelno == logging.WARNING]
    assert "Non-Fedora system detected: Debian GNU/Linux" in warnings
    assert "Using package manager: dnf" in caplog.messages
