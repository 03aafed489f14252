# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Command runners, the only place plugship starts child processes.

The orchestrator never calls subprocess directly. It talks to a
CommandRunner, which can run an executable with arguments in a given
directory and report its exit code, and can look executables up on PATH.
Tests hand the orchestrator a fake; --dry-run hands it DryRunRunner.

No shell=True anywhere: arguments are passed as a list, and the child
inherits our stdin/stdout/stderr so toolchain output streams straight to the
terminal.
"""

import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol

from plugship.logging.logger import get_logger

logger = get_logger(__name__)

# Conventional shell exit codes for "not executable" and "command not found".
COMMAND_NOT_EXECUTABLE: int = 126
COMMAND_NOT_FOUND: int = 127


class CommandRunner(Protocol):
    """What the orchestrator needs from the outside world."""

    def run(self, executable: str, arguments: Sequence[str], cwd: Path) -> int:
        """Run to completion and return the exit code."""
        ...

    def which(self, name: str) -> Optional[str]:
        """Return the resolved path of an executable on PATH, or None."""
        ...


class SubprocessRunner:
    """Runs commands for real with subprocess.run, blocking until they exit."""

    def run(self, executable: str, arguments: Sequence[str], cwd: Path) -> int:
        command = [executable, *arguments]
        try:
            completed = subprocess.run(command, cwd=str(cwd), check=False)
        except FileNotFoundError:
            logger.error(
                "Executable not found",
                extra={"executable": executable, "cwd": str(cwd)},
            )
            return COMMAND_NOT_FOUND
        except PermissionError:
            logger.error(
                "Executable is not runnable",
                extra={"executable": executable, "cwd": str(cwd)},
            )
            return COMMAND_NOT_EXECUTABLE

        return completed.returncode

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)


@dataclass
class DryRunRunner:
    """
    Records commands instead of running them and reports success for each.

    PATH lookups are still real, so a dry run shows the interpreter that
    would actually be picked.
    """

    commands: list[list[str]] = field(default_factory=list)

    def run(self, executable: str, arguments: Sequence[str], cwd: Path) -> int:
        command = [executable, *arguments]
        self.commands.append(command)
        logger.info(
            "Dry run: would execute",
            extra={"command": command, "cwd": str(cwd)},
        )
        return 0

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)
