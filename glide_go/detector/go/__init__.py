"""Go ecosystem detector.

Entry point: GoDetector().detect(project_root) -> GoDetection | None

Detection flow:
1. Score the root with the shared pattern matcher (go.mod required).
2. Read module path and Go version from go.mod.
3. Feature-gated extras: go.work workspace, dev tooling markers.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from glide_go.commands.catalogue import GO_COMMANDS, CommandDefinition, catalogue_snapshot
from glide_go.detector.go.gomod import MANIFEST_FILE, read_gomod
from glide_go.detector.patterns import SIGNAL_BONUS, match_patterns
from glide_go.detector.types import (
    DetectionPatterns,
    FrameworkInfo,
    ManifestError,
    clamp_confidence,
)

logger = logging.getLogger(__name__)

GO_FRAMEWORK = FrameworkInfo(name="go", type="language")

GO_PATTERNS = DetectionPatterns(
    required_files=(MANIFEST_FILE,),
    optional_files=("go.sum", "go.work"),
    directories=("vendor",),
    extensions=(".go",),
)

WORKSPACE_FILE = "go.work"

# Presence of any of these marks the project as using Go dev tooling
TOOL_MARKER_FILES: tuple[str, ...] = (
    ".golangci.yml",
    ".golangci.yaml",
    ".goreleaser.yml",
    ".goreleaser.yaml",
    "Makefile",
)


@dataclass
class GoDetection:
    """Detection record for a Go project.

    Optional fields stay None when their discovery did not succeed; None
    means "unknown". workspace and has_dev_tools are only set to True, and
    stay None when the gate is off or the marker is absent.
    """

    framework: str
    type: str
    confidence: int
    commands: dict[str, CommandDefinition] = field(default_factory=dict)
    version: Optional[str] = None
    module: Optional[str] = None
    workspace: Optional[bool] = None
    has_dev_tools: Optional[bool] = None
    evidence: frozenset[str] = field(default_factory=frozenset)

    @property
    def detected(self) -> bool:
        return True

    def to_metadata(self) -> dict[str, str]:
        """Flatten the record into the host's string->string metadata map."""
        metadata = {
            "framework": self.framework,
            "type": self.type,
            "confidence": str(self.confidence),
        }
        if self.version is not None:
            metadata["version"] = self.version
            metadata["go_version"] = self.version
        if self.module is not None:
            metadata["module"] = self.module
        if self.workspace is not None:
            metadata["workspace"] = _format_bool(self.workspace)
        if self.has_dev_tools is not None:
            metadata["has_dev_tools"] = _format_bool(self.has_dev_tools)
        return metadata


class GoDetector:
    """Detects Go projects and extracts module/version metadata.

    The feature gates are written once by the plugin's configure step
    and only read afterwards.
    """

    def __init__(
        self,
        commands: Optional[Mapping[str, CommandDefinition]] = None,
        enable_workspace: bool = True,
        enable_tools: bool = True,
    ):
        self.framework = GO_FRAMEWORK
        self.patterns = GO_PATTERNS
        self.commands = GO_COMMANDS if commands is None else commands
        self.enable_workspace = enable_workspace
        self.enable_tools = enable_tools

    @property
    def name(self) -> str:
        return self.framework.name

    def set_enable_workspace(self, enabled: bool) -> None:
        self.enable_workspace = enabled

    def set_enable_tools(self, enabled: bool) -> None:
        self.enable_tools = enabled

    def detect(
        self,
        project_root: str | Path,
        cancelled: Optional[threading.Event] = None,
    ) -> Optional[GoDetection]:
        """Run Go detection on `project_root`.

        Returns None when go.mod is absent. Raises FilesystemError if the
        root cannot be listed, and DetectionCancelledError once `cancelled`
        is set. go.mod read failures only leave version and module unset.
        """
        root = Path(project_root)
        match = match_patterns(root, self.patterns, cancelled=cancelled)
        if not match.detected:
            return None

        result = GoDetection(
            framework=self.framework.name,
            type=self.framework.type,
            confidence=match.confidence,
            commands=catalogue_snapshot(self.commands),
            evidence=match.evidence,
        )

        try:
            info = read_gomod(root / MANIFEST_FILE)
        except ManifestError as exc:
            logger.debug("go.mod metadata unavailable (%s): %s", exc.kind, exc)
        else:
            result.version = info.go_version
            result.module = info.module

        if self.enable_workspace and _exists(root / WORKSPACE_FILE):
            result.workspace = True

        if self.enable_tools and has_go_tools(root):
            result.has_dev_tools = True
            result.confidence = clamp_confidence(result.confidence + SIGNAL_BONUS)

        logger.info(
            "Go detection complete: root=%s module=%s version=%s confidence=%d",
            root,
            result.module,
            result.version,
            result.confidence,
        )
        return result

    @staticmethod
    def merge(
        existing: Optional[GoDetection],
        new: Optional[GoDetection],
    ) -> Optional[GoDetection]:
        """Combine a previous record with a fresh one; the fresh one wins.

        Not commutative: merge(a, b) is b whenever b is not None.
        """
        if new is not None:
            return new
        return existing


def has_go_tools(project_root: str | Path) -> bool:
    """Return True if any Go dev tooling marker file exists at the root."""
    root = Path(project_root)
    return any(_exists(root / name) for name in TOOL_MARKER_FILES)


def _exists(path: Path) -> bool:
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def _format_bool(value: bool) -> str:
    return "true" if value else "false"
