# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for plugship.

Usage:
    plugship [-c Debug|Release] [--clean] [-p] [-v VERSION] [-h]
             [--config PATH] [--log-level LEVEL] [--dry-run] [--report PATH]

    plugship                       restore, build, publish in Release
    plugship -c Debug --clean      clean first, then build Debug
    plugship -v 1.4.0 -p           stamp 1.4.0, build, verify the zip

The flow:
  1. Parse the command line (bad input → usage on stderr, USER_ERROR)
  2. --help → usage on stdout, SUCCESS, nothing runs
  3. Load settings (plugship.yaml or --config) and open the log file; a bad
     file or an unopenable log path → CONFIG_ERROR
  4. Run the pipeline against the current directory
  5. Map any fatal error to its exit code; a failed stage passes its own
     exit code through
"""

import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from plugship.cli.arguments import parse_arguments, usage_text
from plugship.cli.exit_codes import (
    CONFIG_ERROR,
    RUNTIME_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
    stage_exit_code,
)
from plugship.config.exceptions import ConfigError
from plugship.config.loader import resolve_settings
from plugship.config.schema import BuildConfig, BuildSettings
from plugship.logging.logger import close_log_file, get_logger, set_log_level
from plugship.pipeline.exceptions import (
    ArgumentError,
    NoInterpreterAvailable,
    StageFailed,
    VersionError,
)
from plugship.pipeline.orchestrator import run_pipeline
from plugship.pipeline.runner import CommandRunner
from plugship.release.report import write_build_report

logger: logging.Logger = get_logger(__name__)


def run(
    argv: Sequence[str],
    working_dir: Optional[Path] = None,
    runner: Optional[CommandRunner] = None,
) -> int:
    """
    Execute one plugship invocation and return its exit code.

    Args:
        argv: Arguments without the program name.
        working_dir: Directory to build in. Defaults to the current directory.
        runner: Process runner override, used by tests.
    """
    try:
        config = parse_arguments(argv)
    except ArgumentError as err:
        sys.stderr.write(usage_text())
        sys.stderr.write(f"\nplugship: error: {err}\n")
        return USER_ERROR

    if config.show_help:
        sys.stdout.write(usage_text())
        return SUCCESS

    if working_dir is None:
        working_dir = Path.cwd()

    try:
        settings = resolve_settings(working_dir, config.config_path)
    except ConfigError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        return CONFIG_ERROR

    log_file = Path(settings.log_file) if settings.log_file else None
    if log_file is not None and not log_file.is_absolute():
        log_file = working_dir / log_file
    try:
        set_log_level(config.log_level or settings.log_level, log_file)
    except OSError as err:
        logger.error(
            "Cannot open log file",
            extra={"path": str(log_file), "error": str(err)},
        )
        return CONFIG_ERROR

    try:
        return _build(config, settings, working_dir, runner)
    finally:
        close_log_file()


def _build(
    config: BuildConfig,
    settings: BuildSettings,
    working_dir: Path,
    runner: Optional[CommandRunner],
) -> int:
    """Run the pipeline, write the report, and map failures to exit codes."""
    try:
        result = run_pipeline(config, settings, working_dir, runner)
    except StageFailed as err:
        logger.error(
            "Build failed",
            extra={"stage": err.stage_name, "exit_code": err.exit_code, "command": err.command},
        )
        return stage_exit_code(err.exit_code)
    except NoInterpreterAvailable as err:
        logger.error("Version update failed", extra={"error": str(err)})
        return RUNTIME_ERROR
    except VersionError as err:
        logger.error("Version resolution failed", extra={"error": str(err)})
        return VALIDATION_ERROR
    except OSError as err:
        logger.error("Filesystem error", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    if config.report_path is not None:
        report_path = config.report_path
        if not report_path.is_absolute():
            report_path = working_dir / report_path
        try:
            write_build_report(result, report_path)
        except OSError as err:
            logger.error("Could not write build report", extra={"error": str(err)})
            return RUNTIME_ERROR

    logger.info(
        "Build succeeded",
        extra={
            "stages": [stage.stage_name for stage in result.stages],
            "version": result.version,
            "artifact_found": result.artifact.exists if result.artifact else None,
        },
    )
    return SUCCESS


def main() -> None:
    """Console-script entrypoint; pyproject.toml's [project.scripts] points here."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
