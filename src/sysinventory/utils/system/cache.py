# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Command output cache module.

Runs each inventory source at most once per run and keeps its output for the
section builders. Raw output is mirrored into the run workspace.

Sources are registered by name. The base set (installed packages,
user-installed packages and Flatpak apps) is loaded eagerly; everything else
is loaded when a section that needs it is enabled.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..core.process import CommandResult, run_command
from ..core.workspace import InventoryWorkspace
from .desktop import DEFAULT_DESKTOP_DIRS, DesktopEntry, scan_desktop_entries

logger = logging.getLogger(__name__)

Runner = Callable[[List[str]], CommandResult]
CachedValue = Union[CommandResult, List[DesktopEntry]]

# Source names
DNF_INSTALLED = "dnf_installed"
DNF_USERINSTALLED = "dnf_userinstalled"
DNF_USERINSTALLED_TABLE = "dnf_userinstalled_table"
DNF_GROUPS = "dnf_groups"
DNF_REPOLIST = "dnf_repolist"
FLATPAK_APPS = "flatpak_apps"
FLATPAK_APP_COLUMNS = "flatpak_app_columns"
FLATPAK_RUNTIMES = "flatpak_runtimes"
SNAP_LIST = "snap_list"
RPM_SIZES = "rpm_sizes"
DU_DNF_CACHE = "du_dnf_cache"
DU_FLATPAK_USER = "du_flatpak_user"
DU_FLATPAK_SYSTEM = "du_flatpak_system"
DU_SNAP = "du_snap"
LSCPU = "lscpu"
LSPCI = "lspci"
FREE = "free"
LSBLK = "lsblk"
LSUSB = "lsusb"
IP_ADDR = "ip_addr"
DESKTOP_ENTRIES = "desktop_entries"

BASE_SOURCES = (DNF_INSTALLED, DNF_USERINSTALLED, FLATPAK_APPS)

RPM_INSTALLED_QUERYFORMAT = "%{NAME}.%{ARCH} %{VERSION}-%{RELEASE} @%{VENDOR}\n"


@dataclass(frozen=True)
class Source:
    """
    One external inventory command.

    Attributes:
        name: Cache key
        command: Primary argv
        fallback: Alternate argv tried when the primary command fails
        skip_header: Leading stdout lines dropped from a successful primary run
        sort_lines: Sort stdout lines
        keep_partial: Keep stdout of a failed run (tools like du report
            partial results with a non-zero status)
        requires_path: Path that must exist for the command to be run
    """

    name: str
    command: Tuple[str, ...]
    fallback: Optional[Tuple[str, ...]] = None
    skip_header: int = 0
    sort_lines: bool = False
    keep_partial: bool = False
    requires_path: Optional[str] = None


def _du_source(name: str, path: str) -> Source:
    return Source(name, ("du", "-sh", path), keep_partial=True, requires_path=path)


def build_sources(package_manager: str, home: Optional[Path] = None) -> Dict[str, Source]:
    """
    Build the source registry for a package manager.

    Args:
        package_manager: "dnf5" or "dnf"
        home: Home directory used for per-user storage paths

    Returns:
        Dict mapping source names to their definitions
    """
    home = Path(home) if home is not None else Path.home()
    pm = package_manager
    # dnf5 does not terminate --qf records with a newline
    record_end = "\n" if pm == "dnf5" else ""

    if pm == "dnf5":
        userinstalled = (pm, "repoquery", "--userinstalled")
    else:
        userinstalled = (pm, "repoquery", "--userinstalled", "--qf", "%{name}")

    sources = [
        Source(
            DNF_INSTALLED,
            (pm, "list", "--installed"),
            fallback=("rpm", "-qa", "--qf", RPM_INSTALLED_QUERYFORMAT),
            skip_header=1,
        ),
        Source(DNF_USERINSTALLED, userinstalled),
        Source(
            DNF_USERINSTALLED_TABLE,
            (pm, "repoquery", "--userinstalled", "--qf", "%-37{name} | %-26{version} | %{reponame}" + record_end),
            sort_lines=True,
        ),
        Source(DNF_GROUPS, (pm, "group", "list", "--installed")),
        Source(DNF_REPOLIST, (pm, "repolist")),
        Source(FLATPAK_APPS, ("flatpak", "list", "--app")),
        Source(
            FLATPAK_APP_COLUMNS,
            ("flatpak", "list", "--app", "--columns=name,application,version,branch"),
            sort_lines=True,
        ),
        Source(FLATPAK_RUNTIMES, ("flatpak", "list", "--runtime", "--columns=name,version,branch"), sort_lines=True),
        Source(SNAP_LIST, ("snap", "list")),
        Source(RPM_SIZES, ("rpm", "-qa", "--qf", "%{SIZE} %{NAME}\n")),
        _du_source(DU_DNF_CACHE, "/var/cache/dnf"),
        _du_source(DU_FLATPAK_USER, str(home / ".var" / "app")),
        _du_source(DU_FLATPAK_SYSTEM, "/var/lib/flatpak"),
        _du_source(DU_SNAP, "/var/lib/snapd/snaps"),
        Source(LSCPU, ("lscpu",)),
        Source(LSPCI, ("lspci",)),
        Source(FREE, ("free", "-h")),
        Source(LSBLK, ("lsblk", "-o", "NAME,SIZE,TYPE,FSTYPE,MOUNTPOINT,MODEL")),
        Source(LSUSB, ("lsusb",)),
        Source(IP_ADDR, ("ip", "-brief", "addr", "show")),
    ]
    return {source.name: source for source in sources}


def _sorted_text(text: str) -> str:
    lines = sorted(line for line in text.splitlines() if line.strip())
    return "\n".join(lines) + ("\n" if lines else "")


def _drop_lines(text: str, count: int) -> str:
    return "".join(text.splitlines(keepends=True)[count:])


class CommandCache:
    """
    Lazily populated, run-once cache of inventory command output.
    """

    def __init__(
        self,
        package_manager: str,
        workspace: Optional[InventoryWorkspace] = None,
        runner: Optional[Runner] = None,
        desktop_dirs: Iterable[Path] = DEFAULT_DESKTOP_DIRS,
        home: Optional[Path] = None,
    ):
        """
        Initialize the cache.

        Args:
            package_manager: Detected DNF-compatible binary
            workspace: Active workspace receiving raw output, optional
            runner: Callable executing an argv; defaults to run_command
            desktop_dirs: Directories scanned for desktop entries
            home: Home directory for per-user storage sizes
        """
        self.package_manager = package_manager
        self.workspace = workspace
        self.runner = runner or run_command
        self.desktop_dirs = tuple(desktop_dirs)
        self.sources = build_sources(package_manager, home=home)
        self._results: Dict[str, CachedValue] = {}

    @property
    def loaded(self) -> List[str]:
        """Names of sources loaded so far, in load order."""
        return list(self._results)

    def get(self, name: str) -> CachedValue:
        """
        Return a source's cached output, running it on first access.

        Raises:
            KeyError: For an unknown source name
        """
        if name in self._results:
            return self._results[name]

        if name == DESKTOP_ENTRIES:
            value: CachedValue = scan_desktop_entries(self.desktop_dirs)
        else:
            if name not in self.sources:
                raise KeyError(f"Unknown inventory source: {name}")
            value = self._run_source(self.sources[name])
            self._store(name, value)

        self._results[name] = value
        return value

    def load(self, names: Iterable[str]) -> Dict[str, CachedValue]:
        """Load several sources and return them keyed by name."""
        return {name: self.get(name) for name in names}

    def load_base(self) -> Dict[str, CachedValue]:
        """Load the package list, user-installed list and Flatpak list."""
        logger.info("Caching package information (this may take a moment)...")
        results = self.load(BASE_SOURCES)
        logger.info("Caching complete")
        return results

    def describe(self, names: Iterable[str]) -> List[str]:
        """Human-readable command lines for the given sources."""
        described = []
        for name in names:
            if name == DESKTOP_ENTRIES:
                dirs = " ".join(str(d) for d in self.desktop_dirs)
                described.append(f"{name}: scan *.desktop in {dirs}")
                continue
            source = self.sources[name]
            line = f"{name}: {' '.join(source.command)}"
            if source.fallback:
                line += f" (fallback: {' '.join(source.fallback)})"
            described.append(line)
        return described

    def _run_source(self, source: Source) -> CommandResult:
        logger.debug(f"Loading source: {source.name}")
        if source.requires_path and not Path(source.requires_path).exists():
            logger.debug(f"{source.requires_path} not found; skipping {source.name}")
            return CommandResult.empty(list(source.command), failed=True)

        result = self.runner(list(source.command))

        if not result.available:
            logger.debug(f"{source.command[0]} is not installed; {source.name} is empty")
            return result

        if result.success:
            stdout = result.stdout
            if source.skip_header:
                stdout = _drop_lines(stdout, source.skip_header)
            if source.sort_lines:
                stdout = _sorted_text(stdout)
            return result.with_stdout(stdout)

        if source.fallback:
            logger.warning(f"{' '.join(source.command[:2])} failed, using {source.fallback[0]} as fallback...")
            fallback = self.runner(list(source.fallback))
            if fallback.success:
                return fallback.with_stdout(_sorted_text(fallback.stdout))
            logger.warning(f"Fallback {' '.join(source.fallback[:2])} failed for {source.name}")
            return CommandResult.empty(list(source.command), failed=True)

        if source.keep_partial:
            return result
        return result.with_stdout("")

    def _store(self, name: str, result: CommandResult) -> None:
        if self.workspace is None or self.workspace.path is None:
            return
        self.workspace.write(name, result.stdout)
