"""Detector module for recognising Go projects.

Public API:
    GoDetector().detect(project_root) -> GoDetection | None
    match_patterns(root, patterns) -> PatternMatch
"""

from glide_go.detector.go import GoDetection, GoDetector
from glide_go.detector.patterns import match_patterns
from glide_go.detector.types import (
    DetectionCancelledError,
    DetectionError,
    DetectionPatterns,
    FilesystemError,
    FrameworkInfo,
    ManifestError,
    PatternMatch,
)

__all__ = [
    "DetectionCancelledError",
    "DetectionError",
    "DetectionPatterns",
    "FilesystemError",
    "FrameworkInfo",
    "GoDetection",
    "GoDetector",
    "ManifestError",
    "PatternMatch",
    "match_patterns",
]
