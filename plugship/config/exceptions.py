# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the settings system.

Kept separate so the CLI can catch settings failures without importing the
loader and its YAML dependency.
"""


class ConfigError(Exception):
    """Base for all settings errors."""


class ConfigLoadError(ConfigError):
    """Raised when a settings file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a settings file parses fine but fails schema validation.
    This covers unknown keys, type mismatches and bad values.
    """
