# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for configuration and user input.

ConfigError covers everything that is wrong before any work starts: a broken
config file, zero expressions on the command line, an unknown counter name.
The CLI catches it without importing the driver or the synthesizer.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a config file parses fine but fails schema validation.
    This covers unknown keys, type mismatches and out-of-range values.
    """
