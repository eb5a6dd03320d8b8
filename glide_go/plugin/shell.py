"""The Go plugin as the host sees it.

GoPlugin wires the detector and the command catalogue behind the five host
operations (metadata, configure, detect, execute, health) and translates
typed detection records into the host's wire format.

Ordering: the host finishes configure() before dispatching detect or
execute requests, so the detector's gates are written without a lock.
"""

import threading
from typing import Any, Mapping, Optional

import structlog

from glide_go import __version__
from glide_go.commands.catalogue import GO_COMMANDS, CommandDefinition
from glide_go.commands.executor import execute_command
from glide_go.detector.go import GoDetector
from glide_go.detector.types import FilesystemError
from glide_go.plugin.config import parse_plugin_config
from glide_go.plugin.errors import PluginNotServingError
from glide_go.plugin.schemas import (
    CommandInfo,
    ContextRequest,
    ContextResponse,
    ExecuteRequest,
    ExecuteResponse,
    Metadata,
    PluginConfig,
)

logger = structlog.get_logger(__name__)

EXTENSION_NAME = "go"

# Reported whenever dev tooling markers are present; hosts rely on this exact list.
DEV_TOOLS: tuple[str, ...] = ("golangci-lint", "goreleaser")

CAPABILITY_DETECT = "detect"
CAPABILITY_EXECUTE = "execute"
CAPABILITY_HEALTH = "health"

PLUGIN_METADATA = Metadata(
    name=EXTENSION_NAME,
    version=__version__,
    author="Glide Team",
    description="Go framework detector and command provider for Glide",
    homepage="https://github.com/ivannovak/glide-plugin-go",
    license="MIT",
    tags=("language", "go", "golang", "detector"),
    aliases=("golang",),
    namespaced=False,
)


class GoPlugin:
    """Host-facing Go plugin.

    Pass `commands={}` to build the detection-only variant, which does not
    advertise the execute capability.
    """

    def __init__(
        self,
        commands: Optional[Mapping[str, CommandDefinition]] = None,
        metadata: Metadata = PLUGIN_METADATA,
    ):
        self._metadata = metadata
        self._commands = GO_COMMANDS if commands is None else commands
        self._config = PluginConfig()
        self._serving = True
        self._registered = False
        self.detector = GoDetector(commands=self._commands)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def metadata(self) -> Metadata:
        return self._metadata

    def capabilities(self) -> list[str]:
        caps = [CAPABILITY_DETECT]
        if self._commands:
            caps.append(CAPABILITY_EXECUTE)
        caps.append(CAPABILITY_HEALTH)
        return caps

    def register(self) -> None:
        """Publish metadata and capabilities once, before serving requests."""
        if self._registered:
            return
        self._registered = True
        logger.info(
            "plugin_registered",
            plugin=self._metadata.name,
            version=self._metadata.version,
            capabilities=self.capabilities(),
            commands=len(self._commands),
        )

    def shutdown(self) -> None:
        self._serving = False
        logger.info("plugin_shutdown", plugin=self._metadata.name)

    def health_check(self) -> None:
        """Raise PluginNotServingError once shutdown has started."""
        if not self._serving:
            raise PluginNotServingError("plugin is shutting down")

    @property
    def config(self) -> PluginConfig:
        return self._config

    def configure(self, config: PluginConfig | Mapping[str, Any] | None) -> PluginConfig:
        """Validate `config`, fill defaults, and push the gates into the detector.

        Raises ConfigInvalidError when validation fails; the previous
        configuration stays in effect.
        """
        parsed = parse_plugin_config(config)
        self._config = parsed
        self.detector.set_enable_workspace(parsed.enable_workspace)
        self.detector.set_enable_tools(parsed.enable_tools)
        logger.info(
            "plugin_configured",
            enable_workspace=parsed.enable_workspace,
            enable_tools=parsed.enable_tools,
        )
        return parsed

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect_context(
        self,
        request: ContextRequest,
        cancelled: Optional[threading.Event] = None,
    ) -> ContextResponse:
        """Detect a Go project and translate the record for the host.

        A root that cannot be listed is reported as "not detected"; the
        cause is logged and echoed in metadata["error"]. Setting `cancelled`
        aborts the walk with DetectionCancelledError.
        """
        project_root = request.project_root or request.working_dir

        try:
            record = self.detector.detect(project_root, cancelled=cancelled)
        except FilesystemError as exc:
            logger.error(
                "detect_failed",
                project_root=project_root,
                kind=exc.kind,
                error=str(exc),
            )
            return ContextResponse(
                extension_name=EXTENSION_NAME,
                detected=False,
                metadata={"error": str(exc)},
            )

        if record is None:
            return ContextResponse(extension_name=EXTENSION_NAME, detected=False)

        return ContextResponse(
            extension_name=EXTENSION_NAME,
            detected=True,
            version=record.version or "",
            frameworks=[record.framework],
            tools=list(DEV_TOOLS) if record.has_dev_tools else [],
            metadata=record.to_metadata(),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def list_commands(self) -> list[CommandInfo]:
        return [
            CommandInfo(
                name=name,
                description=definition.description,
                category=definition.category,
                visibility=definition.visibility,
            )
            for name, definition in sorted(self._commands.items())
        ]

    async def execute(self, request: ExecuteRequest) -> ExecuteResponse:
        result = await execute_command(
            self._commands,
            request.name,
            args=request.args,
            work_dir=request.work_dir,
            env=request.env,
            timeout=request.timeout,
        )
        return ExecuteResponse(
            success=result.success,
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
            error=result.error,
        )
