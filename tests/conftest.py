"""Shared fixtures for the glide-plugin-go test suite.

Project trees are written to tmp_path; the HTTP client talks to the app
in-process through httpx's ASGITransport.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from glide_go.core.config import Settings
from glide_go.main import create_app
from glide_go.plugin.shell import GoPlugin

WORKSPACE_GOMOD = """\
module github.com/example/test

go 1.24
"""

WORKSPACE_GOWORK = """\
go 1.24

use (
\t./module1
\t./module2
)
"""


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Create `files` (relative path -> content) under `root`."""
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path: Path):
    """Return a callable that writes a file tree under tmp_path."""

    def _make(files: dict[str, str]) -> Path:
        return write_files(tmp_path, files)

    return _make


@pytest.fixture
def workspace_project(tmp_path: Path) -> Path:
    """go.mod with module + version, plus a go.work workspace file."""
    return write_files(tmp_path, {"go.mod": WORKSPACE_GOMOD, "go.work": WORKSPACE_GOWORK})


@pytest.fixture
def tooled_project(tmp_path: Path) -> Path:
    """go.mod declaring go 1.22 plus a Makefile."""
    return write_files(
        tmp_path,
        {"go.mod": "module github.com/example/tooled\n\ngo 1.22\n", "Makefile": "all:\n"},
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(sentry_dsn="", debug=False, config_file=None)


@pytest.fixture
def plugin() -> GoPlugin:
    return GoPlugin()


@pytest.fixture
def app(settings: Settings, plugin: GoPlugin):
    return create_app(settings=settings, plugin=plugin)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the plugin app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
