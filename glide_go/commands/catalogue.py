"""Static catalogue of Go developer commands.

Keys are the user-facing command names. A ":" in a name (test:race,
mod:tidy) is only a naming convention. Shell strings are split on
whitespace by the executor, so entries must not contain quoted arguments.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

CATEGORIES = frozenset({"build", "test", "run", "format", "lint", "dependencies"})


@dataclass(frozen=True)
class CommandDefinition:
    """A named shell invocation offered to the host.

    Visibility "project-only" tells the host to list the command only
    inside a detected Go project.
    """

    cmd: str
    description: str
    category: str
    visibility: str = "project-only"


GO_COMMANDS: Mapping[str, CommandDefinition] = MappingProxyType({
    "build": CommandDefinition("go build ./...", "Build Go project", "build"),
    "test": CommandDefinition("go test ./...", "Run Go tests", "test"),
    "test:v": CommandDefinition(
        "go test -v ./...", "Run Go tests with verbose output", "test"
    ),
    "test:race": CommandDefinition(
        "go test -race ./...", "Run Go tests with race detector", "test"
    ),
    "test:cover": CommandDefinition(
        "go test -cover ./...", "Run Go tests with coverage", "test"
    ),
    "run": CommandDefinition("go run .", "Run Go application", "run"),
    "fmt": CommandDefinition("go fmt ./...", "Format Go code", "format"),
    "vet": CommandDefinition("go vet ./...", "Examine Go source code", "lint"),
    "mod:tidy": CommandDefinition(
        "go mod tidy", "Add missing and remove unused modules", "dependencies"
    ),
    "mod:download": CommandDefinition(
        "go mod download", "Download modules to local cache", "dependencies"
    ),
    "mod:vendor": CommandDefinition(
        "go mod vendor", "Make vendored copy of dependencies", "dependencies"
    ),
    "generate": CommandDefinition("go generate ./...", "Generate Go files", "build"),
})


def catalogue_snapshot(
    catalogue: Mapping[str, CommandDefinition] = GO_COMMANDS,
) -> dict[str, CommandDefinition]:
    """Return a mutable copy of the catalogue for inclusion in a detection record."""
    return dict(catalogue)
