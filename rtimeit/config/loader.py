# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Turns an optional `--config` file into an RtimeitConfig.

No file means every default. A named file has to exist, decode as UTF-8,
parse as a YAML mapping and pass the pydantic schema; the first failure
stops rtimeit before any workspace is created or cargo is spawned.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from rtimeit.config.exceptions import ConfigLoadError, ConfigValidationError
from rtimeit.config.schema import RtimeitConfig


def _read_text(config_path: Path) -> str:
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")
    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        return config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err


def _parse_mapping(raw_text: str, config_path: Path) -> dict[str, Any]:
    """
    Parse YAML text that must hold the top-level `global`/`toolchain`/`defaults` mapping.

    A blank file parses to None and counts as an empty mapping.
    """
    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )
    return parsed


def load_config(config_path: Optional[Path] = None) -> RtimeitConfig:
    """
    Load the config for one rtimeit invocation.

    Raises:
        ConfigLoadError: missing file, unreadable or non-UTF-8 bytes, bad YAML,
                         or a top level that isn't a mapping.
        ConfigValidationError: unknown keys, wrong types, out-of-range values.
    """
    if config_path is None:
        return RtimeitConfig()

    raw_data = _parse_mapping(_read_text(config_path), config_path)

    try:
        return RtimeitConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err
