# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Command-line parsing for plugship.

Turns the raw token list into a frozen BuildConfig. argparse does the
tokenising, but its own exit-on-error and built-in help are switched off:
every problem comes back as ArgumentError so the entrypoint decides what to
print and which exit code to use.

Rules:
  - -c/--configuration and -v/--version take the next token as their value,
    even one that starts with a dash (`-v -h` sets the version to "-h").
  - --clean, -p/--package, -h/--help, --dry-run are switches.
  - Flags may come in any order and may repeat; the last value wins, and a
    switch given once stays on.
  - Anything unrecognised is an error. Long flags must be spelled in full.
  - Everything after the first -h/--help that is not a flag value is
    ignored; everything before it is still validated.
"""

import argparse
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from plugship.config.schema import CONFIGURATIONS, DEFAULT_CONFIGURATION, BuildConfig
from plugship.pipeline.exceptions import ArgumentError

HELP_FLAGS: frozenset[str] = frozenset({"-h", "--help"})

# Flags that take the next token as their value, mapped to their long spelling.
VALUE_FLAGS: dict[str, str] = {
    "-c": "--configuration",
    "--configuration": "--configuration",
    "-v": "--version",
    "--version": "--version",
    "--config": "--config",
    "--log-level": "--log-level",
    "--report": "--report",
}

_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _configuration(value: str) -> str:
    """Accept Debug/Release in any letter case, return the canonical spelling."""
    for name in CONFIGURATIONS:
        if value.lower() == name.lower():
            return name
    raise argparse.ArgumentTypeError(
        f"invalid configuration '{value}' (choose from {', '.join(CONFIGURATIONS)})"
    )


def _log_level(value: str) -> str:
    upper = value.upper()
    if upper not in _LOG_LEVELS:
        raise argparse.ArgumentTypeError(
            f"invalid log level '{value}' (choose from {', '.join(_LOG_LEVELS)})"
        )
    return upper


def build_parser() -> argparse.ArgumentParser:
    """The argparse definition behind parse_arguments and the usage text."""
    parser = argparse.ArgumentParser(
        prog="plugship",
        description="Build, publish and verify a plugin release.",
        add_help=False,
        allow_abbrev=False,
        exit_on_error=False,
    )
    parser.add_argument(
        "-c",
        "--configuration",
        type=_configuration,
        default=DEFAULT_CONFIGURATION,
        metavar="{Debug,Release}",
        help=f"Build configuration (default: {DEFAULT_CONFIGURATION}).",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        default=False,
        help="Run the toolchain clean and delete the build output first.",
    )
    parser.add_argument(
        "-p",
        "--package",
        action="store_true",
        default=False,
        help="Verify the packaged artifact after publish.",
    )
    parser.add_argument(
        "-v",
        "--version",
        type=str,
        default=None,
        metavar="VERSION",
        help="Stamp this version via the update helper before building.",
    )
    parser.add_argument(
        "-h",
        "--help",
        action="store_true",
        default=False,
        dest="show_help",
        help="Show this message and exit.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        dest="config_path",
        metavar="PATH",
        help="Settings YAML (default: plugship.yaml in the working directory, if present).",
    )
    parser.add_argument(
        "--log-level",
        type=_log_level,
        default=None,
        dest="log_level",
        metavar="LEVEL",
        help="Logging verbosity: DEBUG, INFO, WARNING, ERROR or CRITICAL.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Log every command that would run without running it.",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        dest="report_path",
        metavar="PATH",
        help="Write a JSON build report to PATH.",
    )
    return parser


def usage_text() -> str:
    return build_parser().format_help()


def _pair_values(tokens: Sequence[str]) -> tuple[list[str], bool]:
    """
    Glue each value flag to the token after it and find the help switch.

    argparse refuses a value that starts with a dash, so `-v --clean` would
    fail there. Rewriting the pair to `--version=--clean` lets any token be a
    value. A help flag only counts when it is not some flag's value; it stops
    the scan and the rest of the line is dropped. A value flag with nothing
    after it is left alone for argparse to reject.
    """
    paired: list[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token in VALUE_FLAGS and index + 1 < len(tokens):
            paired.append(f"{VALUE_FLAGS[token]}={tokens[index + 1]}")
            index += 2
            continue
        if token in HELP_FLAGS:
            return paired, True
        paired.append(token)
        index += 1
    return paired, False


def parse_arguments(tokens: Sequence[str]) -> BuildConfig:
    """
    Parse a raw argument list into a BuildConfig.

    Raises:
        ArgumentError: Unknown flag, missing value, or invalid value.
    """
    paired, show_help = _pair_values(list(tokens))

    parser = build_parser()
    try:
        namespace, unknown = parser.parse_known_args(paired)
    except argparse.ArgumentError as err:
        raise ArgumentError(str(err)) from err

    if unknown:
        raise ArgumentError(f"unrecognized arguments: {' '.join(unknown)}")

    values = vars(namespace)
    values["show_help"] = show_help or values["show_help"]

    try:
        return BuildConfig.model_validate(values)
    except ValidationError as err:
        raise ArgumentError(str(err)) from err
