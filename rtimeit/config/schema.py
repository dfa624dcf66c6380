# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for rtimeit.

Each config section is a frozen pydantic model:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Every field has a default, so running without a config file is the same as
loading an empty one.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class GlobalConfig(BaseModel):
    """Cross-cutting settings: observability only."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    log_level: str = Field(
        default="WARNING",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_VALID_LOG_LEVELS)}")
        return upper


class ToolchainConfig(BaseModel):
    """
    How the cargo toolchain and the generated benchmark get invoked.

    No timeout is applied unless timeout_seconds is set. Both cargo and the
    benchmark binary are expected to finish or be interrupted by the user.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    cargo: str = Field(default="cargo", description="cargo executable name or path")
    criterion_version: str = Field(
        default="0.3",
        min_length=1,
        description="Version requirement for the criterion crate in the generated manifest",
    )
    offline: bool = Field(
        default=False,
        description="Set CARGO_NET_OFFLINE so cargo never touches the network",
    )
    target_dir: Optional[str] = Field(
        default=None,
        description="Shared CARGO_TARGET_DIR so compiled dependencies survive between runs",
    )
    workspace_parent: Optional[str] = Field(
        default=None,
        description="Directory to create temporary workspaces in (system temp dir when unset)",
    )
    timeout_seconds: Optional[int] = Field(
        default=None,
        ge=1,
        description="Optional hard limit for each child process",
    )


class DefaultsConfig(BaseModel):
    """Extra dependencies and `use` lines added to every generated benchmark."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    dependencies: list[str] = Field(
        default_factory=list,
        description="Crates to add, as `name`, `name@version` or a raw `name = ...` line",
    )
    uses: list[str] = Field(
        default_factory=list,
        description="Paths to bring into scope with `use`",
    )


class RtimeitConfig(BaseModel):
    """
    Root config. Maps to the top-level keys of the YAML file:

        global:     GlobalConfig
        toolchain:  ToolchainConfig
        defaults:   DefaultsConfig
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        populate_by_name=True,
    )

    global_config: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
