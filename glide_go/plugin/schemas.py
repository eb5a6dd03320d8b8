"""Pydantic schemas for the host-facing RPC surface.

Follows RORO pattern: receive a typed object, return a typed object.
Byte fields (command output) travel as base64 strings in JSON.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Metadata(BaseModel):
    """Plugin identity served to the host. Immutable after construction."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    author: str
    description: str
    homepage: str
    license: str
    tags: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    namespaced: bool = Field(
        default=False,
        description="Commands are exposed without a plugin prefix (build, not go:build).",
    )


class PluginConfig(BaseModel):
    """Feature gates configured by the host (.glide.yml under plugins.go).

    Both snake_case and the host's camelCase keys are accepted; unknown
    keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    enable_workspace: bool = Field(
        default=True,
        validation_alias=AliasChoices("enable_workspace", "enableWorkspace"),
        description="Detect go.work workspaces",
    )
    enable_tools: bool = Field(
        default=True,
        validation_alias=AliasChoices("enable_tools", "enableTools"),
        description="Detect Go development tooling (golangci-lint, goreleaser, make)",
    )


class CapabilitiesResponse(BaseModel):
    capabilities: list[str]


class ConfigureResponse(BaseModel):
    status: str = "ok"
    config: PluginConfig


class ContextRequest(BaseModel):
    """Payload for a detect request. project_root wins over working_dir."""

    project_root: str = ""
    working_dir: str = ""


class ContextResponse(BaseModel):
    """Detection outcome in the host's wire format."""

    extension_name: str
    detected: bool = False
    version: str = Field(default="", description="Go version; empty when unknown")
    frameworks: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)


class ExecuteRequest(BaseModel):
    """Payload for running a catalogue command."""

    name: str
    args: list[str] = Field(default_factory=list)
    work_dir: str = ""
    env: dict[str, str] = Field(default_factory=dict)
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds before the command is cancelled; no limit when unset",
    )


class ExecuteResponse(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    success: bool
    exit_code: int
    stdout: bytes = b""
    stderr: bytes = b""
    error: str = ""


class CommandInfo(BaseModel):
    name: str
    description: str
    category: str
    visibility: str = "project-only"


class HealthResponse(BaseModel):
    status: str = "ok"
