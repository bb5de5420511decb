"""Tests for the notice.toml scanner and scanner detection."""

from pathlib import Path

import pytest

from notice_tracker.models import BindingSpec, StagedFileSpec
from notice_tracker.scanners import NoticeTomlScanner, PyprojectScanner, get_scanner

NOTICE_TOML = """
output = "THIRD-PARTY-NOTICES.md"

[[unit]]
name = "plugin"
path = "plugin"
notice = "NOTICE.md"

[[unit.dependency]]
name = "Microsoft.WSL.PluginApi"
version = "2.4.4"
link = "https://github.com/microsoft/WSL"

[[unit.dependency.file]]
source = "build/native/include/WslPluginApi.h"
destination = "include/WslPluginApi.h"
replacements = { "#pragma once" = "#ifndef WSL_PLUGIN_API_H" }

[unit.dependency.bindings]
header = "build/native/include/WslPluginApi.h"
output = "bindings.rs"

[[unit]]
name = "service"

[[unit.dependency]]
name = "Acme.Widget"
version = 1
"""


class TestNoticeTomlScanner:
    """Test suite for NoticeTomlScanner."""

    @pytest.fixture
    def notice_toml(self, tmp_path: Path) -> Path:
        """Write a notice.toml with two units."""
        path = tmp_path / "notice.toml"
        path.write_text(NOTICE_TOML, encoding="utf-8")
        return path

    def test_can_handle(self, tmp_path: Path) -> None:
        """Test file name detection."""
        assert NoticeTomlScanner.can_handle(tmp_path / "notice.toml")
        assert not NoticeTomlScanner.can_handle(tmp_path / "pyproject.toml")

    def test_scan(self, notice_toml: Path, tmp_path: Path) -> None:
        """Test units, dependencies and staged files."""
        workspace = NoticeTomlScanner(notice_toml).scan()
        root = tmp_path.resolve()

        assert workspace.root == root
        assert workspace.output == root / "THIRD-PARTY-NOTICES.md"
        assert [unit.name for unit in workspace.units] == ["plugin", "service"]

        plugin = workspace.units[0]
        assert plugin.root == root / "plugin"
        assert plugin.notice_path == root / "plugin" / "NOTICE.md"
        dependency = plugin.dependencies[0]
        assert dependency.name == "Microsoft.WSL.PluginApi"
        assert dependency.version == "2.4.4"
        assert dependency.link == "https://github.com/microsoft/WSL"
        assert dependency.files == (
            StagedFileSpec(
                source="build/native/include/WslPluginApi.h",
                destination="include/WslPluginApi.h",
                replacements=(("#pragma once", "#ifndef WSL_PLUGIN_API_H"),),
            ),
        )
        assert dependency.bindings == BindingSpec(
            header="build/native/include/WslPluginApi.h", output="bindings.rs"
        )

    def test_defaults(self, notice_toml: Path, tmp_path: Path) -> None:
        """Test the defaults of optional unit and dependency fields."""
        service = NoticeTomlScanner(notice_toml).scan().units[1]

        assert service.root == tmp_path.resolve()
        assert service.notice_path is None
        assert service.dependencies[0].version == "1"
        assert service.dependencies[0].files == ()
        assert service.dependencies[0].bindings is None

    def test_missing_version(self, tmp_path: Path) -> None:
        """Test that a dependency needs a version."""
        path = tmp_path / "notice.toml"
        path.write_text('[[unit]]\nname = "a"\n[[unit.dependency]]\nname = "Acme"\n')

        with pytest.raises(ValueError, match="version"):
            NoticeTomlScanner(path).scan()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Test that invalid TOML is a ValueError."""
        path = tmp_path / "notice.toml"
        path.write_text("[[unit]\n")

        with pytest.raises(ValueError):
            NoticeTomlScanner(path).scan()

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            NoticeTomlScanner(tmp_path / "notice.toml").scan()


def test_get_scanner(tmp_path: Path) -> None:
    """Test scanner auto-detection."""
    assert isinstance(get_scanner(tmp_path / "notice.toml"), NoticeTomlScanner)
    assert isinstance(get_scanner(tmp_path / "pyproject.toml"), PyprojectScanner)

    with pytest.raises(ValueError, match="Supported files"):
        get_scanner(tmp_path / "poetry.lock")
