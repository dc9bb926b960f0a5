# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Run-scoped temporary storage.

Raw command output is kept in a temporary directory that exists only for the
duration of one inventory run and is removed on every exit path.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class InventoryWorkspace:
    """
    Context manager owning the temporary cache directory of a run.

    Usage:
        with InventoryWorkspace() as workspace:
            workspace.write("flatpak_apps", output)
    """

    def __init__(self, prefix: str = "inventory.", base_dir: Optional[str] = None):
        self.prefix = prefix
        self.base_dir = base_dir
        self._tmp: Optional[tempfile.TemporaryDirectory] = None
        self.path: Optional[Path] = None

    def __enter__(self) -> "InventoryWorkspace":
        self._tmp = tempfile.TemporaryDirectory(prefix=self.prefix, dir=self.base_dir)
        self.path = Path(self._tmp.name)
        logger.debug(f"Created temporary workspace: {self.path}")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.cleanup()
        return False

    def cleanup(self) -> None:
        """Remove the temporary directory. Safe to call more than once."""
        if self._tmp is None:
            return
        logger.info("Cleaning up temporary files...")
        self._tmp.cleanup()
        logger.debug(f"Removed temporary workspace: {self.path}")
        self._tmp = None

    def write(self, name: str, text: str) -> Path:
        """Store text under the workspace and return its path."""
        if self.path is None:
            raise RuntimeError("Workspace is not active")
        target = self.path / f"{name}.txt"
        target.write_text(text, encoding="utf-8")
        return target
