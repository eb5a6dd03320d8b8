"""Tests for the go.mod reader."""

from pathlib import Path

import pytest

from glide_go.detector.go.gomod import GoModInfo, read_gomod
from glide_go.detector.types import (
    ManifestError,
    ManifestNotFoundError,
    ManifestParseEmptyError,
)


def _gomod(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "go.mod"
    path.write_text(content, encoding="utf-8")
    return path


FULL_GOMOD = """\
module github.com/example/myapp

go 1.23

toolchain go1.23.4

require (
    github.com/gin-gonic/gin v1.9.1
)
"""


class TestReadGomod:
    def test_reads_module_and_version(self, tmp_path):
        info = read_gomod(_gomod(tmp_path, FULL_GOMOD))
        assert info == GoModInfo(module="github.com/example/myapp", go_version="1.23")

    def test_order_does_not_matter(self, tmp_path):
        info = read_gomod(_gomod(tmp_path, "go 1.21\nmodule example.com/late\n"))
        assert info.module == "example.com/late"
        assert info.go_version == "1.21"

    def test_leading_whitespace_is_trimmed(self, tmp_path):
        info = read_gomod(_gomod(tmp_path, "   module example.com/indented  \n\tgo 1.22\n"))
        assert info.module == "example.com/indented"
        assert info.go_version == "1.22"

    def test_first_match_wins(self, tmp_path):
        info = read_gomod(_gomod(tmp_path, "module first\ngo 1.20\nmodule second\ngo 1.99\n"))
        assert info.module == "first"
        assert info.go_version == "1.20"

    def test_toolchain_line_is_not_a_version(self, tmp_path):
        info = read_gomod(_gomod(tmp_path, "module m\ntoolchain go1.22.1\n"))
        assert info.go_version is None
        assert info.module == "m"

    def test_version_only(self, tmp_path):
        info = read_gomod(_gomod(tmp_path, "go 1.22\n"))
        assert info == GoModInfo(module=None, go_version="1.22")

    def test_module_only(self, tmp_path):
        info = read_gomod(_gomod(tmp_path, "module example.com/only\n"))
        assert info == GoModInfo(module="example.com/only", go_version=None)

    def test_keyword_without_space_is_ignored(self, tmp_path):
        with pytest.raises(ManifestParseEmptyError):
            read_gomod(_gomod(tmp_path, "modulex foo\ngopher 1\n"))


class TestReadGomodErrors:
    def test_missing_file_raises_not_found(self, tmp_path):
        with pytest.raises(ManifestNotFoundError) as excinfo:
            read_gomod(tmp_path / "go.mod")
        assert excinfo.value.kind == "not-found"

    def test_no_directives_raises_parse_empty(self, tmp_path):
        with pytest.raises(ManifestParseEmptyError) as excinfo:
            read_gomod(_gomod(tmp_path, "// just a comment\nrequire foo v1.0.0\n"))
        assert excinfo.value.kind == "parse-empty"

    def test_empty_file_raises_parse_empty(self, tmp_path):
        with pytest.raises(ManifestParseEmptyError):
            read_gomod(_gomod(tmp_path, ""))

    def test_errors_share_a_base_class(self):
        assert issubclass(ManifestNotFoundError, ManifestError)
        assert issubclass(ManifestParseEmptyError, ManifestError)
