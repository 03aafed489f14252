# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration models for plugship.

Two frozen pydantic models drive a run:

  - BuildConfig: what the user asked for on the command line (configuration,
    clean, package, version, help). Produced once by the argument parser.
  - BuildSettings: how this particular plugin is laid out and built (which
    toolchain, which project, where the descriptor and artifact live). Loaded
    from plugship.yaml, with a default for every field.

Both use ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked
"""

import string
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Configuration = Literal["Debug", "Release"]

CONFIGURATIONS: tuple[str, ...] = ("Debug", "Release")
DEFAULT_CONFIGURATION: Configuration = "Release"

# Placeholders artifact_template may use.
ARTIFACT_TEMPLATE_FIELDS: frozenset[str] = frozenset({"plugin_id", "version", "configuration"})

_VALID_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _check_log_level(value: str) -> str:
    upper = value.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(sorted(_VALID_LOG_LEVELS))}")
    return upper


class BuildConfig(BaseModel):
    """The validated command line. Read-only for the rest of the run."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    configuration: Configuration = Field(
        default=DEFAULT_CONFIGURATION,
        description="Build configuration passed to every toolchain stage",
    )
    clean: bool = Field(default=False, description="Run the clean stage first")
    package: bool = Field(default=False, description="Verify the packaged artifact after publish")
    version: Optional[str] = Field(
        default=None,
        description="Version to stamp via the update helper; also names the artifact",
    )
    show_help: bool = Field(default=False, description="Print usage and run nothing")
    config_path: Optional[Path] = Field(default=None, description="Explicit settings file")
    log_level: Optional[str] = Field(
        default=None,
        description="Overrides the settings file log_level when given",
    )
    dry_run: bool = Field(default=False, description="Log invocations without running them")
    report_path: Optional[Path] = Field(default=None, description="Where to write the JSON report")

    @field_validator("version")
    @classmethod
    def _version_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("version must not be empty")
        return trimmed

    @field_validator("log_level")
    @classmethod
    def _log_level_known(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_log_level(value)


class VersionHelperSettings(BaseModel):
    """
    Where the version-update helper lives and how to run it.

    The native helper is run directly when it exists and is executable.
    Otherwise the script helper is handed to the first interpreter from
    `interpreters` that is on PATH.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    native: str = Field(
        default="scripts/update-version.sh",
        description="Directly executable helper, relative to the working directory",
    )
    script: str = Field(
        default="scripts/update-version.ps1",
        description="Interpreted helper, relative to the working directory",
    )
    interpreters: list[str] = Field(
        default_factory=lambda: ["pwsh", "powershell"],
        description="Interpreter preference order for the script helper",
    )


class BuildSettings(BaseModel):
    """
    Project layout and toolchain settings. Maps to plugship.yaml.

    Every path is relative to the working directory the pipeline is run
    against, never to the process's current directory.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    toolchain: str = Field(default="dotnet", description="Build toolchain executable")
    project: str = Field(default=".", description="Project or solution path handed to the toolchain")
    descriptor: str = Field(
        default="Plugin.csproj",
        description="Markup file holding the <PluginVersion> element",
    )
    plugin_id: str = Field(default="Plugin", description="Plugin identifier used in the artifact name")
    output_dir: str = Field(default="bin", description="Build output removed by --clean")
    artifact_template: str = Field(
        default="dist/{plugin_id}-{version}.zip",
        description="Artifact path template; placeholders: plugin_id, version, configuration",
    )
    normalization_flags: list[str] = Field(
        default_factory=lambda: [
            "-p:AppendTargetFrameworkToOutputPath=false",
            "-p:AppendRuntimeIdentifierToOutputPath=false",
        ],
        description="Output-path flags appended to build and publish",
    )
    version_helper: VersionHelperSettings = Field(default_factory=VersionHelperSettings)
    library_extension: str = Field(
        default=".dll",
        description="Archive entries with this suffix are listed in the artifact report",
    )
    log_level: str = Field(default="INFO", description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("toolchain", "project", "descriptor", "plugin_id", "output_dir")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("artifact_template")
    @classmethod
    def _template_placeholders_known(cls, value: str) -> str:
        for _, field_name, format_spec, conversion in string.Formatter().parse(value):
            if field_name is None:
                continue
            if field_name not in ARTIFACT_TEMPLATE_FIELDS:
                raise ValueError(
                    f"unknown placeholder '{{{field_name}}}', allowed: "
                    f"{', '.join(sorted(ARTIFACT_TEMPLATE_FIELDS))}"
                )
            if format_spec or conversion:
                raise ValueError(
                    f"placeholder '{{{field_name}}}' must be plain, "
                    "format specs and conversions are not supported"
                )
        return value

    @field_validator("library_extension")
    @classmethod
    def _extension_has_dot(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError("library_extension must start with '.'")
        return value

    @field_validator("log_level")
    @classmethod
    def _log_level_known(cls, value: str) -> str:
        return _check_log_level(value)
