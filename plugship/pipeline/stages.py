# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Stage definitions and argument assembly.

A Stage is just a name plus the exact command line to run. Building the
command lines is kept apart from running them so the order and arguments
can be checked without starting a single process.

Toolchain stages, in order:
    clean    <toolchain> clean   <project> -c <cfg>                       (--clean only)
    restore  <toolchain> restore <project>
    build    <toolchain> build   <project> -c <cfg> --no-restore <flags>
    publish  <toolchain> publish <project> -c <cfg> --no-build   <flags>

The version-update stage runs ahead of all of them when a version was given.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from plugship.config.schema import BuildConfig, BuildSettings
from plugship.logging.logger import get_logger
from plugship.pipeline.exceptions import NoInterpreterAvailable, StageFailed
from plugship.pipeline.runner import CommandRunner
from plugship.pipeline.strategies import Outcome, Strategy, first_success

logger = get_logger(__name__)

VERSION_UPDATE = "version-update"
CLEAN = "clean"
RESTORE = "restore"
BUILD = "build"
PUBLISH = "publish"


@dataclass(frozen=True)
class Stage:
    """One external invocation."""

    name: str
    executable: str
    arguments: list[str] = field(default_factory=list)

    @property
    def command(self) -> list[str]:
        return [self.executable, *self.arguments]


@dataclass(frozen=True)
class StageResult:
    """Exit status of a stage that ran."""

    stage_name: str
    exit_code: int
    arguments: list[str]


def toolchain_stages(config: BuildConfig, settings: BuildSettings) -> list[Stage]:
    """Assemble the toolchain stages that apply to this configuration."""
    toolchain = settings.toolchain
    project = settings.project
    configuration = config.configuration
    flags = list(settings.normalization_flags)

    stages: list[Stage] = []
    if config.clean:
        stages.append(Stage(CLEAN, toolchain, [CLEAN, project, "-c", configuration]))
    stages.append(Stage(RESTORE, toolchain, [RESTORE, project]))
    stages.append(
        Stage(BUILD, toolchain, [BUILD, project, "-c", configuration, "--no-restore", *flags])
    )
    stages.append(
        Stage(PUBLISH, toolchain, [PUBLISH, project, "-c", configuration, "--no-build", *flags])
    )
    return stages


def _native_helper(path: Path, version: str) -> Strategy[Stage]:
    def attempt() -> Outcome[Stage]:
        if not path.is_file():
            return Outcome.failure(f"native helper {path} does not exist")
        if os.name != "nt" and not os.access(path, os.X_OK):
            return Outcome.failure(f"native helper {path} is not executable")
        return Outcome.success(Stage(VERSION_UPDATE, str(path), [version]))

    return attempt


def _interpreted_helper(
    interpreter: str, script: Path, version: str, runner: CommandRunner,
) -> Strategy[Stage]:
    def attempt() -> Outcome[Stage]:
        resolved = runner.which(interpreter)
        if resolved is None:
            return Outcome.failure(f"interpreter {interpreter} not on PATH")
        return Outcome.success(Stage(VERSION_UPDATE, resolved, [str(script), version]))

    return attempt


def version_update_stage(
    version: str,
    settings: BuildSettings,
    working_dir: Path,
    runner: CommandRunner,
) -> Stage:
    """
    Pick how to launch the version helper.

    The native helper wins if it's there and executable. Otherwise the
    script helper goes to the first interpreter found on PATH.

    Raises:
        NoInterpreterAvailable: Neither option is usable.
    """
    helper = settings.version_helper
    native = working_dir / helper.native
    script = working_dir / helper.script

    strategies: list[Strategy[Stage]] = [_native_helper(native, version)]
    strategies.extend(
        _interpreted_helper(name, script, version, runner) for name in helper.interpreters
    )

    outcome = first_success(strategies)
    if not outcome.ok or outcome.value is None:
        logger.error(
            "No way to run the version helper",
            extra={"reasons": outcome.reasons},
        )
        raise NoInterpreterAvailable(helper.interpreters)
    return outcome.value


def execute_stage(stage: Stage, runner: CommandRunner, working_dir: Path) -> StageResult:
    """
    Run one stage and block until it exits.

    Raises:
        StageFailed: On any non-zero exit code.
    """
    logger.info(
        "Stage started",
        extra={"stage": stage.name, "command": stage.command, "cwd": str(working_dir)},
    )

    exit_code = runner.run(stage.executable, stage.arguments, working_dir)

    if exit_code != 0:
        logger.error(
            "Stage failed",
            extra={"stage": stage.name, "exit_code": exit_code, "command": stage.command},
        )
        raise StageFailed(stage.name, exit_code, stage.command)

    logger.info("Stage finished", extra={"stage": stage.name, "exit_code": exit_code})
    return StageResult(stage_name=stage.name, exit_code=exit_code, arguments=list(stage.arguments))
