"""Generic filename/extension scorer shared by framework detectors.

Scoring:
  required files missing  -> not detected, confidence 0
  base                    -> 50
  each optional file      -> +10
  each marker directory   -> +10
  >= 1 matching file      -> +10
  >= 5 matching files     -> +10 more

Every step is clamped to [0, 100]. The extension walk is shallow: files in
the root and in its immediate subdirectories (SCAN_DEPTH = 2). Every detector
built on this module shares the same depth.

A threading.Event may be passed as `cancelled`; the walk checks it between
entries and raises DetectionCancelledError once it is set.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from glide_go.detector.types import (
    DetectionCancelledError,
    DetectionPatterns,
    FilesystemError,
    PatternMatch,
    clamp_confidence,
)

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 50
SIGNAL_BONUS = 10
EXTENSION_FEW_THRESHOLD = 1
EXTENSION_MANY_THRESHOLD = 5
SCAN_DEPTH = 2


def match_patterns(
    root: str | Path,
    patterns: DetectionPatterns,
    cancelled: Optional[threading.Event] = None,
) -> PatternMatch:
    """Score `root` against `patterns`.

    Raises FilesystemError only when the root directory cannot be listed;
    stat failures on individual paths count as "absent". Raises
    DetectionCancelledError when `cancelled` is set.
    """
    root = Path(root)
    _check_cancelled(cancelled)

    for name in patterns.required_files:
        if not _exists(root / name):
            logger.debug("Required file %s missing under %s", name, root)
            return PatternMatch.no_match()

    evidence = {f"required:{name}" for name in patterns.required_files}
    confidence = BASE_CONFIDENCE

    for name in patterns.optional_files:
        if _exists(root / name):
            confidence = clamp_confidence(confidence + SIGNAL_BONUS)
            evidence.add(f"optional:{name}")

    for name in patterns.directories:
        if _is_dir(root / name):
            confidence = clamp_confidence(confidence + SIGNAL_BONUS)
            evidence.add(f"directory:{name}")

    if patterns.extensions:
        counts = count_extensions(root, patterns.extensions, cancelled=cancelled)
        total = sum(counts.values())
        if total >= EXTENSION_FEW_THRESHOLD:
            confidence = clamp_confidence(confidence + SIGNAL_BONUS)
        if total >= EXTENSION_MANY_THRESHOLD:
            confidence = clamp_confidence(confidence + SIGNAL_BONUS)
        evidence.update(f"extension:{ext}={n}" for ext, n in counts.items() if n)

    return PatternMatch(detected=True, confidence=confidence, evidence=frozenset(evidence))


def count_extensions(
    root: Path,
    extensions: tuple[str, ...],
    depth: int = SCAN_DEPTH,
    cancelled: Optional[threading.Event] = None,
) -> dict[str, int]:
    """Count files under `root` whose suffix is in `extensions`.

    Raises FilesystemError when `root` cannot be listed. Unreadable
    subdirectories are skipped.
    """
    wanted = {ext.lower() for ext in extensions}
    counts = dict.fromkeys(sorted(wanted), 0)

    try:
        entries = list(os.scandir(root))
    except OSError as exc:
        raise FilesystemError(str(root), exc) from exc

    _tally(entries, wanted, counts, depth - 1, cancelled)
    return counts


def _tally(
    entries: list[os.DirEntry],
    wanted: set[str],
    counts: dict[str, int],
    remaining_depth: int,
    cancelled: Optional[threading.Event],
) -> None:
    for entry in entries:
        _check_cancelled(cancelled)
        try:
            if entry.is_file():
                suffix = os.path.splitext(entry.name)[1].lower()
                if suffix in wanted:
                    counts[suffix] += 1
            elif remaining_depth > 0 and entry.is_dir(follow_symlinks=False):
                try:
                    children = list(os.scandir(entry.path))
                except OSError as exc:
                    logger.debug("Skipping unreadable directory %s: %s", entry.path, exc)
                    continue
                _tally(children, wanted, counts, remaining_depth - 1, cancelled)
        except OSError:
            continue


def _check_cancelled(cancelled: Optional[threading.Event]) -> None:
    if cancelled is not None and cancelled.is_set():
        raise DetectionCancelledError("detection cancelled")


def _exists(path: Path) -> bool:
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False
