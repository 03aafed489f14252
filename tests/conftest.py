# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for plugship tests.

The recording runner stands in for every external process: it remembers
each command line and answers with whatever exit code the test set up, so
no test ever needs dotnet or pwsh installed.
"""

import textwrap
import zipfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Optional

import pytest


class RecordingRunner:
    """
    Fake CommandRunner.

    exit_codes is keyed by the toolchain subcommand (first argument, e.g.
    "restore") or by executable path; anything not listed exits 0.
    on_path maps interpreter names to what `which` should return.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.cwds: list[Path] = []
        self.exit_codes: dict[str, int] = {}
        self.on_path: dict[str, str] = {}

    def run(self, executable: str, arguments: Sequence[str], cwd: Path) -> int:
        self.calls.append([executable, *arguments])
        self.cwds.append(cwd)
        if arguments and arguments[0] in self.exit_codes:
            return self.exit_codes[arguments[0]]
        return self.exit_codes.get(executable, 0)

    def which(self, name: str) -> Optional[str]:
        return self.on_path.get(name)

    @property
    def subcommands(self) -> list[str]:
        return [call[1] for call in self.calls if len(call) > 1]


@pytest.fixture()
def fake_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture()
def workdir(tmp_path: Path) -> Path:
    """A resolved working directory, so paths compare equal to what the pipeline builds."""
    return tmp_path.resolve()


@pytest.fixture()
def write_descriptor(workdir: Path) -> Callable[..., Path]:
    """Write Plugin.csproj (or another name) with the given body."""

    def _write(body: str, name: str = "Plugin.csproj") -> Path:
        path = workdir / name
        path.write_text(textwrap.dedent(body), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def make_archive(workdir: Path) -> Callable[..., Path]:
    """Build a zip at a path relative to the working directory."""

    def _make(relative: str, entries: dict[str, bytes]) -> Path:
        path = workdir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as archive:
            for name, data in entries.items():
                archive.writestr(name, data)
        return path

    return _make
