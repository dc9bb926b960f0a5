# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Shared fixtures for the inventory tests.

No external tool is executed: commands are answered by FakeRunner from canned
output keyed by argv prefix.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import pytest

from sysinventory.utils.config import RunConfig, load_categories
from sysinventory.utils.core.process import CommandResult
from sysinventory.utils.system.cache import CommandCache

DNF_LIST_OUTPUT = """Installed packages
firefox.x86_64 120.0-1.fc39 @updates
gcc.x86_64 13.2.1-4.fc39 @fedora
kernel.x86_64 6.5.6-300.fc39 @updates
libreoffice-core.x86_64 7.6.2.1-1.fc39 @updates
mesa-vulkan-drivers.x86_64 23.2.1-2.fc39 @updates
plasma-desktop.x86_64 5.27.8-1.fc39 @updates
steam.i686 1.0.0.78-1.fc39 @rpmfusion-nonfree-steam
wine-core.x86_64 8.17-1.fc39 @updates
"""

RPM_QA_OUTPUT = """wine-core.x86_64 8.17-1.fc39 @Fedora Project
bash.x86_64 5.2.21-1.fc39 @Fedora Project
kernel.x86_64 6.5.6-300.fc39 @Fedora Project
"""

USERINSTALLED_OUTPUT = """firefox-0:120.0-1.fc39.x86_64
steam-0:1.0.0.78-1.fc39.i686
"""

USERINSTALLED_TABLE_OUTPUT = """steam                                 | 1.0.0.78                   | rpmfusion-nonfree-steam
firefox                               | 120.0                      | updates
"""

FLATPAK_APPS_OUTPUT = """Steam\tcom.valvesoftware.Steam\t1.0.0.78\tstable\tsystem
GNU Image Manipulation Program\torg.gimp.GIMP\t2.10.36\tstable\tsystem
"""

FLATPAK_NON_GAMING_OUTPUT = """GNU Image Manipulation Program\torg.gimp.GIMP\t2.10.36\tstable\tsystem
"""

SNAP_LIST_OUTPUT = """Name    Version   Rev    Tracking       Publisher   Notes
core    16-2.61   16202  latest/stable  canonical✓  core
hello   2.10      42     latest/stable  canonical✓  -
"""

RPM_SIZES_OUTPUT = """1048576 bash
524288000 kernel-modules
2097152 firefox
"""

LSCPU_OUTPUT = """Architecture:            x86_64
CPU op-mode(s):          32-bit, 64-bit
Byte Order:              Little Endian
CPU(s):                  16
Model name:              AMD Ryzen 7 5800X 8-Core Processor
Thread(s) per core:      2
Core(s) per socket:      8
Socket(s):               1
CPU max MHz:             4850.0000
"""

LSPCI_OUTPUT = """00:00.0 Host bridge: Advanced Micro Devices, Inc. [AMD] Starship/Matisse Root Complex
0a:00.0 VGA compatible controller: Advanced Micro Devices, Inc. [AMD/ATI] Navi 21 [Radeon RX 6800]
0a:00.1 Audio device: Advanced Micro Devices, Inc. [AMD/ATI] Navi 21 HDMI Audio
"""

OS_RELEASE_FEDORA = """NAME="Fedora Linux"
VERSION="39 (KDE Plasma)"
ID=fedora
VERSION_ID=39
PRETTY_NAME="Fedora Linux 39 (KDE Plasma)"
"""


def default_outputs(package_manager: str = "dnf5") -> Dict[Tuple[str, ...], str]:
    pm = package_manager
    return {
        (pm, "list", "--installed"): DNF_LIST_OUTPUT,
        ("rpm", "-qa", "--qf", "%{NAME}.%{ARCH} %{VERSION}-%{RELEASE} @%{VENDOR}\n"): RPM_QA_OUTPUT,
        (pm, "repoquery", "--userinstalled"): USERINSTALLED_OUTPUT,
        (pm, "repoquery", "--userinstalled", "--qf", "%{name}"): "firefox\nsteam\n",
        (pm, "repoquery", "--userinstalled", "--qf", "%-37{name} | %-26{version} | %{reponame}\n"): USERINSTALLED_TABLE_OUTPUT,
        (pm, "repoquery", "--userinstalled", "--qf", "%-37{name} | %-26{version} | %{reponame}"): USERINSTALLED_TABLE_OUTPUT,
        (pm, "group", "list", "--installed"): "ID                   Name                Installed\nkde-desktop          KDE                       yes\n",
        (pm, "repolist"): "repo id       repo name\nfedora        Fedora 39 - x86_64\nupdates       Fedora 39 - x86_64 - Updates\n",
        ("flatpak", "list", "--app"): FLATPAK_APPS_OUTPUT,
        ("flatpak", "list", "--app", "--columns=name,application,version,branch"): FLATPAK_APPS_OUTPUT,
        ("flatpak", "list", "--runtime"): "Freedesktop Platform\t23.08\tx86_64\n",
        ("snap", "list"): SNAP_LIST_OUTPUT,
        ("rpm", "-qa", "--qf", "%{SIZE} %{NAME}\n"): RPM_SIZES_OUTPUT,
        ("du", "-sh"): "512M\t/some/path\n",
        ("lscpu",): LSCPU_OUTPUT,
        ("lspci",): LSPCI_OUTPUT,
        ("free", "-h"): "               total        used        free\nMem:            31Gi       9.8Gi        12Gi\n",
        ("lsblk",): "NAME   SIZE TYPE FSTYPE MOUNTPOINT MODEL\nnvme0n1 931.5G disk        Samsung SSD 980\n",
        ("lsusb",): "Bus 001 Device 002: ID 046d:c52b Logitech, Inc. Unifying Receiver\n",
        ("ip", "-brief", "addr", "show"): "lo  UNKNOWN  127.0.0.1/8\nenp5s0  UP  192.168.1.20/24\n",
    }


class FakeRunner:
    """Answers commands from canned output; records every call."""

    def __init__(
        self,
        outputs: Dict[Tuple[str, ...], str] = None,
        missing: Iterable[str] = (),
        failing: Iterable[Tuple[str, ...]] = (),
        interrupt_on: Tuple[str, ...] = None,
    ):
        self.outputs = dict(outputs if outputs is not None else default_outputs())
        self.missing = set(missing)
        self.failing = [tuple(prefix) for prefix in failing]
        self.interrupt_on = interrupt_on
        self.calls: List[Tuple[str, ...]] = []

    @staticmethod
    def _matches(command: Tuple[str, ...], prefix: Tuple[str, ...]) -> bool:
        return command[: len(prefix)] == prefix

    def __call__(self, command: List[str]) -> CommandResult:
        command = tuple(command)
        self.calls.append(command)

        if self.interrupt_on and self._matches(command, self.interrupt_on):
            raise KeyboardInterrupt()
        if command[0] in self.missing:
            return CommandResult.unavailable(list(command))
        if any(self._matches(command, prefix) for prefix in self.failing):
            return CommandResult(returncode=1, stderr="Error: simulated failure", command=list(command))

        matches = [prefix for prefix in self.outputs if self._matches(command, prefix)]
        stdout = self.outputs[max(matches, key=len)] if matches else ""
        return CommandResult(returncode=0, stdout=stdout, command=list(command))

    def count(self, prefix: Tuple[str, ...]) -> int:
        return sum(1 for call in self.calls if self._matches(call, prefix))


def write_desktop_file(directory: Path, name: str, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(body, encoding="utf-8")
    return path


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def desktop_dirs(tmp_path):
    """Two application directories holding three visible apps and two hidden entries."""
    system_dir = tmp_path / "usr-share-applications"
    user_dir = tmp_path / "local-share-applications"

    write_desktop_file(
        system_dir,
        "org.kde.konsole.desktop",
        "[Desktop Entry]\nType=Application\nName=Konsole\nComment=Terminal emulator\n"
        "Exec=konsole %u\nCategories=Qt;KDE;System;TerminalEmulator;\n",
    )
    write_desktop_file(
        system_dir,
        "firefox.desktop",
        "[Desktop Entry]\nType=Application\nName=Firefox\nExec=firefox %u\nCategories=Network;WebBrowser;\n"
        "\n[Desktop Action new-window]\nName=Open a New Window\nExec=firefox --new-window %u\n",
    )
    write_desktop_file(
        system_dir,
        "hidden.desktop",
        "[Desktop Entry]\nType=Application\nName=Hidden Helper\nNoDisplay=true\nExec=helper\n",
    )
    write_desktop_file(system_dir, "link.desktop", "[Desktop Entry]\nType=Link\nName=Docs\nURL=https://example.org\n")
    write_desktop_file(
        user_dir / "wine" / "Programs",
        "game.desktop",
        "[Desktop Entry]\nType=Application\nName=Some Game\nExec=env WINEPREFIX=/home/u/.wine wine game.exe\n",
    )
    return (system_dir, user_dir)


@pytest.fixture
def categories():
    return load_categories()


@pytest.fixture
def run_config(tmp_path, categories):
    return RunConfig(
        output_dir=tmp_path / "out",
        timestamp=datetime(2026, 10, 17, 9, 30, 0),
        package_manager="dnf5",
        os_release={"ID": "fedora", "NAME": "Fedora Linux", "VERSION_ID": "39"},
        categories=categories,
    )


@pytest.fixture
def make_cache(fake_runner, desktop_dirs, tmp_path):
    """Factory building a CommandCache backed by a FakeRunner."""

    def _make(runner=None, package_manager="dnf5", workspace=None):
        return CommandCache(
            package_manager,
            workspace=workspace,
            runner=runner or fake_runner,
            desktop_dirs=desktop_dirs,
            home=tmp_path / "home",
        )

    return _make


@pytest.fixture
def os_release_file(tmp_path):
    path = tmp_path / "os-release"
    path.write_text(OS_RELEASE_FEDORA, encoding="utf-8")
    return path
