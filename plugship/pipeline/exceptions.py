# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Fatal errors raised while parsing arguments, resolving the version, or
running build stages.

Each one aborts the run; the CLI entrypoint maps them to exit codes.
Advisory problems (a missing artifact, an unreadable archive) are never
raised, only logged.
"""

import shlex
from collections.abc import Sequence
from pathlib import Path


class PipelineError(Exception):
    """Base for all fatal pipeline errors."""


class ArgumentError(PipelineError):
    """Malformed command line: unknown flag, missing value, bad configuration name."""


class VersionError(PipelineError):
    """Base for version resolution failures."""


class DescriptorNotFound(VersionError):
    """The descriptor file the version should come from does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Descriptor not found: {path}")


class VersionNotFound(VersionError):
    """Neither the structured parse nor the text fallback produced a version."""

    def __init__(self, path: Path, reasons: Sequence[str] = ()) -> None:
        self.path = path
        self.reasons = list(reasons)
        detail = f" ({'; '.join(self.reasons)})" if self.reasons else ""
        super().__init__(f"No PluginVersion found in {path}{detail}")


class NoInterpreterAvailable(PipelineError):
    """No native version helper and none of the preferred interpreters are on PATH."""

    def __init__(self, interpreters: Sequence[str]) -> None:
        self.interpreters = list(interpreters)
        tried = ", ".join(self.interpreters) if self.interpreters else "none configured"
        super().__init__(f"No interpreter available for the version helper (tried: {tried})")


class StageFailed(PipelineError):
    """An external stage exited non-zero. Carries the full invocation."""

    def __init__(self, stage_name: str, exit_code: int, command: Sequence[str]) -> None:
        self.stage_name = stage_name
        self.exit_code = exit_code
        self.command = list(command)
        super().__init__(
            f"Stage '{stage_name}' failed with exit code {exit_code}: {shlex.join(self.command)}"
        )
