# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Settings loader. Reads plugship.yaml and produces a validated, frozen BuildSettings.

The loading pipeline is linear:
  1. Read raw text from the file
  2. Parse as YAML into a plain dict
  3. Hand the dict to pydantic for schema validation
  4. Return the frozen settings object

A broken settings file stops the run before any stage is invoked. There is
no fallback to defaults once a file has been named or found.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from plugship.config.exceptions import ConfigLoadError, ConfigValidationError
from plugship.config.schema import BuildSettings

DEFAULT_SETTINGS_FILE = "plugship.yaml"


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed dict.

    An empty file is treated as an empty mapping, so a placeholder
    plugship.yaml means "all defaults".

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, or isn't valid YAML.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Settings file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Settings path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read settings file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Settings file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def load_settings(config_path: Path) -> BuildSettings:
    """
    Load and validate a settings file.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (unknown keys, wrong types, bad templates).
    """
    raw_data = _read_yaml_file(config_path)

    try:
        return BuildSettings.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Settings validation failed for {config_path}:\n{err}"
        ) from err


def resolve_settings(working_dir: Path, config_path: Optional[Path] = None) -> BuildSettings:
    """
    Pick the settings for a run.

    An explicit path must exist. Without one, plugship.yaml in the working
    directory is used when present, and built-in defaults otherwise.
    """
    if config_path is not None:
        if not config_path.is_absolute():
            config_path = working_dir / config_path
        return load_settings(config_path)

    candidate = working_dir / DEFAULT_SETTINGS_FILE
    if candidate.is_file():
        return load_settings(candidate)

    return BuildSettings()
