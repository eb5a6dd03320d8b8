"""go.mod reader for module identity and Go version.

Line-by-line scan for the two leading directives only:

    module github.com/example/app
    go 1.24

Everything else in go.mod (require, replace, toolchain, ...) is ignored.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from glide_go.detector.types import ManifestNotFoundError, ManifestParseEmptyError

logger = logging.getLogger(__name__)

MANIFEST_FILE = "go.mod"
MODULE_PREFIX = "module "
VERSION_PREFIX = "go "


@dataclass(frozen=True)
class GoModInfo:
    module: Optional[str] = None
    go_version: Optional[str] = None


def read_gomod(path: str | Path) -> GoModInfo:
    """Extract the module path and Go version from a go.mod file.

    Directives may appear in any order; the first occurrence of each wins.
    Raises ManifestNotFoundError if the file cannot be opened and
    ManifestParseEmptyError if it contains neither directive.
    """
    path = Path(path)
    module: Optional[str] = None
    go_version: Optional[str] = None

    try:
        handle = path.open(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ManifestNotFoundError(str(path), str(exc)) from exc

    with handle:
        for line in handle:
            stripped = line.strip()
            if module is None and stripped.startswith(MODULE_PREFIX):
                module = stripped[len(MODULE_PREFIX):].strip()
            elif go_version is None and stripped.startswith(VERSION_PREFIX):
                go_version = stripped[len(VERSION_PREFIX):].strip()
            if module is not None and go_version is not None:
                break

    if module is None and go_version is None:
        raise ManifestParseEmptyError(str(path), "no module or go directive found")

    logger.debug("Parsed %s: module=%s go=%s", path, module, go_version)
    return GoModInfo(module=module, go_version=go_version)
