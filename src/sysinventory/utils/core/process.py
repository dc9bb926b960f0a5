# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Subprocess execution utilities.

This module provides the single place where external inventory tools are
executed. Every invocation returns a CommandResult instead of raising:
- Missing binaries are reported as unavailable
- Timeouts and non-zero exit codes are reported as failures
- stderr is routed to the log so it ends up in the error log file

All subprocess usage across the application should go through run_command()
so that failure handling and logging stay consistent.
"""

import logging
import os
import shutil
import subprocess  # nosec B404 # Inventory tools are fixed argv lists, never shell strings
import time
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

# Inventory tools are parsed by label ("Model name", "CPU(s)"), so pin the locale
PARSE_LOCALE = "C.UTF-8"

DEFAULT_TIMEOUT = 120.0

# Log record attribute marking stderr of successful commands; the error log keeps these
COMMAND_STDERR_ATTR = "command_stderr"


class CommandResult:
    """
    Captured output of one external command invocation.
    """

    def __init__(
        self,
        returncode: int,
        stdout: str = "",
        stderr: str = "",
        command: List[str] = None,
        execution_time: float = 0.0,
        timed_out: bool = False,
        available: bool = True,
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.command = command or []
        self.execution_time = execution_time
        self.timed_out = timed_out
        self.available = available

    @classmethod
    def unavailable(cls, command: List[str]) -> "CommandResult":
        """Result for a tool that is not installed."""
        return cls(returncode=127, command=command, available=False)

    @classmethod
    def empty(cls, command: List[str] = None, failed: bool = False) -> "CommandResult":
        """Empty result, optionally marked as failed."""
        return cls(returncode=1 if failed else 0, command=command)

    @property
    def success(self) -> bool:
        """Check if the command executed successfully."""
        return self.available and self.returncode == 0 and not self.timed_out

    @property
    def failed(self) -> bool:
        """Check if the command was available but failed."""
        return self.available and not self.success

    @property
    def lines(self) -> List[str]:
        """Non-empty stdout lines."""
        return [line for line in self.stdout.splitlines() if line.strip()]

    @property
    def count(self) -> int:
        return len(self.lines)

    def with_stdout(self, stdout: str) -> "CommandResult":
        """Copy of this result carrying transformed stdout."""
        return CommandResult(
            returncode=self.returncode,
            stdout=stdout,
            stderr=self.stderr,
            command=self.command,
            execution_time=self.execution_time,
            timed_out=self.timed_out,
            available=self.available,
        )

    def __str__(self) -> str:
        if not self.available:
            status = "UNAVAILABLE"
        else:
            status = "SUCCESS" if self.success else "FAILED"
        return f"CommandResult(status={status}, returncode={self.returncode}, time={self.execution_time:.2f}s)"

    def __repr__(self) -> str:
        return f"<{self} command={' '.join(self.command)!r}>"


class CommandExecutor:
    """
    Executor for inventory commands with uniform error handling.

    Commands run synchronously with captured output. The executor never
    raises for missing tools, timeouts or non-zero exit codes.
    """

    def __init__(self, max_execution_time: float = DEFAULT_TIMEOUT, log_commands: bool = True):
        """
        Initialize the executor.

        Args:
            max_execution_time: Default timeout in seconds for each command
            log_commands: Whether to log each executed command at DEBUG level
        """
        self.max_execution_time = max_execution_time
        self.log_commands = log_commands

    def run(self, command: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        """
        Execute a command and capture its output.

        Args:
            command: argv of the command to execute
            timeout: Maximum execution time in seconds

        Returns:
            CommandResult: Execution results with metadata
        """
        cmd_list = self._prepare_command(command)
        effective_timeout = timeout or self.max_execution_time

        if shutil.which(cmd_list[0]) is None:
            logger.debug(f"Command not found: {cmd_list[0]}")
            return CommandResult.unavailable(cmd_list)

        if self.log_commands:
            logger.debug(f"Executing command: {' '.join(cmd_list)} (timeout={effective_timeout})")

        start_time = time.time()
        try:
            completed = subprocess.run(
                cmd_list,
                env=self._prepare_environment(),
                timeout=effective_timeout,
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
        except subprocess.TimeoutExpired:
            execution_time = time.time() - start_time
            logger.warning(f"Command timed out after {execution_time:.2f}s: {' '.join(cmd_list)}")
            return CommandResult(
                returncode=-1,
                stderr=f"Command timed out after {effective_timeout}s",
                command=cmd_list,
                execution_time=execution_time,
                timed_out=True,
            )
        except FileNotFoundError:
            return CommandResult.unavailable(cmd_list)
        except OSError as e:
            execution_time = time.time() - start_time
            logger.error(f"Unexpected error executing command {' '.join(cmd_list)}: {e}")
            return CommandResult(returncode=-1, stderr=str(e), command=cmd_list, execution_time=execution_time)

        result = CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            command=cmd_list,
            execution_time=time.time() - start_time,
        )
        self._log_stderr(result)
        return result

    def _prepare_command(self, command: Sequence[str]) -> List[str]:
        """Prepare and validate command format."""
        if isinstance(command, str):
            raise TypeError("Commands must be argv sequences, not shell strings")
        cmd_list = [str(arg) for arg in command]
        if not cmd_list:
            raise ValueError("Empty command not allowed")
        return cmd_list

    def _prepare_environment(self) -> Dict[str, str]:
        """Environment for subprocess execution, with the parse locale pinned."""
        safe_env = os.environ.copy()
        safe_env["LC_ALL"] = PARSE_LOCALE
        return safe_env

    def _log_stderr(self, result: CommandResult) -> None:
        stderr = result.stderr.strip()
        if result.failed:
            logger.warning(
                f"Command failed with exit code {result.returncode}: {' '.join(result.command)}"
                + (f"\n{stderr}" if stderr else "")
            )
        elif stderr:
            logger.debug(f"stderr from {' '.join(result.command)}:\n{stderr}", extra={COMMAND_STDERR_ATTR: True})


# Global executor instance
_global_executor = None


def get_executor() -> CommandExecutor:
    """
    Get the global command executor instance.

    Returns:
        CommandExecutor: Global executor instance
    """
    global _global_executor
    if _global_executor is None:
        _global_executor = CommandExecutor()
    return _global_executor


def run_command(command: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
    """
    Execute a command with default settings.

    This is the primary function that should be used throughout the application
    for subprocess execution instead of direct subprocess calls.

    Args:
        command: argv of the command to execute
        timeout: Execution timeout

    Returns:
        CommandResult: Execution results
    """
    return get_executor().run(command=command, timeout=timeout)


def check_command_available(command: str) -> bool:
    """
    Check if a command is available on the system.

    Args:
        command: Command name to check

    Returns:
        bool: True if command is on PATH
    """
    return shutil.which(command) is not None
