"""Shared types for the detector module.

The pattern matcher consumes DetectionPatterns and produces a PatternMatch.
Language detectors build on top of the match and raise the errors below
when the filesystem or the manifest cannot be read.
"""

from dataclasses import dataclass, field

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100


def clamp_confidence(value: int) -> int:
    """Clamp a confidence score to the [0, 100] range."""
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, value))


@dataclass(frozen=True)
class FrameworkInfo:
    """Identity of the framework a detector recognises."""

    name: str
    type: str


@dataclass(frozen=True)
class DetectionPatterns:
    """Filesystem signals the pattern matcher looks for.

    required_files are all-or-nothing. optional_files, directories and
    extensions only raise confidence.
    """

    required_files: tuple[str, ...] = ()
    optional_files: tuple[str, ...] = ()
    directories: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()


@dataclass(frozen=True)
class PatternMatch:
    """Outcome of matching DetectionPatterns against a project root.

    Evidence lists every signal that contributed to the score, e.g.
    "required:go.mod" or "extension:.go=7".
    """

    detected: bool
    confidence: int
    evidence: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def no_match(cls) -> "PatternMatch":
        return cls(detected=False, confidence=0)


class DetectionError(Exception):
    """Base class for detection failures. `kind` is a stable error tag."""

    kind = "detection-error"


class FilesystemError(DetectionError):
    """Raised when the project root itself cannot be listed."""

    kind = "filesystem-error"

    def __init__(self, root: str, cause: OSError):
        self.root = root
        self.cause = cause
        super().__init__(f"cannot list project root {root}: {cause}")


class ManifestError(DetectionError):
    """Raised when a manifest file yields no usable metadata."""

    kind = "manifest-error"

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class ManifestNotFoundError(ManifestError):
    kind = "not-found"


class ManifestParseEmptyError(ManifestError):
    kind = "parse-empty"


class DetectionCancelledError(DetectionError):
    """Raised when the caller abandons a detection while the tree walk runs."""

    kind = "cancelled"
