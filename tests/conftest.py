"""Pytest configuration and fixtures."""

import io
import zipfile
from pathlib import Path
from typing import Callable, Union

import pytest

NUSPEC_NAMESPACE = "http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd"


def build_nuspec(
    package_id: str = "Acme.Widget",
    version: str = "1.0.0",
    authors: str = "Acme",
    extra: str = "",
) -> str:
    """Return a nuspec document with the required fields and ``extra`` metadata."""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<package xmlns="{NUSPEC_NAMESPACE}">
  <metadata>
    <id>{package_id}</id>
    <version>{version}</version>
    <authors>{authors}</authors>
    <description>Widgets for everyone.</description>
    {extra}
  </metadata>
</package>
"""


def build_nupkg(members: dict[str, Union[str, bytes]]) -> bytes:
    """Return the bytes of a zip archive holding ``members``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in members.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def nuspec_factory() -> Callable[..., str]:
    """Return the nuspec document builder."""
    return build_nuspec


@pytest.fixture
def nupkg_factory() -> Callable[[dict[str, Union[str, bytes]]], bytes]:
    """Return the package archive builder."""
    return build_nupkg


@pytest.fixture
def widget_nuspec() -> str:
    """Return the nuspec of an MIT licensed package with a dated copyright."""
    return build_nuspec(
        extra=(
            "<copyright>Copyright 2021 Acme</copyright>\n"
            '    <license type="expression">MIT</license>\n'
            "    <licenseUrl>https://licenses.nuget.org/MIT</licenseUrl>"
        )
    )


@pytest.fixture
def widget_header() -> str:
    """Return the content of the header shipped by the widget package."""
    return "#pragma once\r\n#define WIDGET_API_VERSION 1\r\n"


@pytest.fixture
def packages_dir(tmp_path: Path) -> Path:
    """Return the directory receiving acquired artifacts."""
    return tmp_path / "packages"


@pytest.fixture
def widget_artifact(packages_dir: Path, widget_nuspec: str, widget_header: str) -> Path:
    """Create an extracted Acme.Widget 1.0.0 artifact and return its directory."""
    artifact_dir = packages_dir / "Acme.Widget.1.0.0"
    header = artifact_dir / "build" / "native" / "include" / "widget.h"
    header.parent.mkdir(parents=True)
    header.write_bytes(widget_header.encode("utf-8"))
    (artifact_dir / "Acme.Widget.nuspec").write_text(widget_nuspec, encoding="utf-8")
    return artifact_dir
