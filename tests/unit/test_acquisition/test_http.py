"""Unit tests for the HTTP download installer."""

from pathlib import Path
from typing import AsyncGenerator

import aiohttp
import pytest
from aioresponses import aioresponses

from notice_tracker.acquisition import HttpInstaller
from notice_tracker.exceptions import DownloadFailed, ExtractionFailed
from notice_tracker.models import AcquisitionMode, AcquisitionRequest

PACKAGE_URL = "https://www.nuget.org/api/v2/package/Acme.Widget/1.0.0"


@pytest.fixture
async def installer() -> AsyncGenerator[HttpInstaller, None]:
    """Return an HttpInstaller instance for testing."""
    installer = HttpInstaller()
    yield installer
    await installer.close()


@pytest.fixture
def request_(tmp_path: Path) -> AcquisitionRequest:
    """Return a fallback-only request for Acme.Widget 1.0.0."""
    return AcquisitionRequest(
        "Acme.Widget", "1.0.0", tmp_path / "packages", AcquisitionMode.FALLBACK_ONLY
    )


@pytest.fixture
def widget_nupkg(nupkg_factory, widget_nuspec: str) -> bytes:
    """Return the package archive of Acme.Widget."""
    return nupkg_factory(
        {
            "Acme.Widget.nuspec": widget_nuspec,
            "build/native/include/widget.h": "#pragma once\n",
        }
    )


def leftovers(directory: Path) -> list[str]:
    return [path.name for path in directory.iterdir() if path.name.startswith(".")]


def test_build_url(request_: AcquisitionRequest) -> None:
    """Test the default download URL."""
    assert HttpInstaller().build_url(request_) == PACKAGE_URL


def test_build_url_custom_template(request_: AcquisitionRequest) -> None:
    """Test a mirror URL template."""
    installer = HttpInstaller("https://mirror.example.com/{name}/{version}.nupkg")
    assert installer.build_url(request_) == "https://mirror.example.com/Acme.Widget/1.0.0.nupkg"


@pytest.mark.asyncio
async def test_install_downloads_and_extracts(
    installer: HttpInstaller, request_: AcquisitionRequest, widget_nupkg: bytes
) -> None:
    """Test a successful download and extraction."""
    with aioresponses() as mock:
        mock.get(PACKAGE_URL, body=widget_nupkg)

        path = await installer.install(request_)

    assert path == request_.artifact_dir.resolve()
    assert (path / "Acme.Widget.nuspec").is_file()
    assert (path / "build" / "native" / "include" / "widget.h").read_text() == "#pragma once\n"
    assert leftovers(path.parent) == []


@pytest.mark.asyncio
async def test_install_replaces_previous_extraction(
    installer: HttpInstaller, request_: AcquisitionRequest, widget_nupkg: bytes
) -> None:
    """Test that re-running replaces the extracted root."""
    stale = request_.artifact_dir / "stale.txt"
    stale.parent.mkdir(parents=True)
    stale.write_text("old")

    with aioresponses() as mock:
        mock.get(PACKAGE_URL, body=widget_nupkg)
        path = await installer.install(request_)

    assert not (path / "stale.txt").exists()
    assert (path / "Acme.Widget.nuspec").is_file()


@pytest.mark.asyncio
async def test_install_http_error(
    installer: HttpInstaller, request_: AcquisitionRequest
) -> None:
    """Test that a non-2xx status is a download failure with its status."""
    with aioresponses() as mock:
        mock.get(PACKAGE_URL, status=404)

        with pytest.raises(DownloadFailed) as exc_info:
            await installer.install(request_)

    assert exc_info.value.status == 404
    assert not request_.artifact_dir.exists()


@pytest.mark.asyncio
async def test_install_network_error(
    installer: HttpInstaller, request_: AcquisitionRequest
) -> None:
    """Test that transport errors are download failures without status."""
    with aioresponses() as mock:
        mock.get(PACKAGE_URL, exception=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(DownloadFailed) as exc_info:
            await installer.install(request_)

    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_install_invalid_archive(
    installer: HttpInstaller, request_: AcquisitionRequest
) -> None:
    """Test that a body which is not a zip archive fails extraction."""
    with aioresponses() as mock:
        mock.get(PACKAGE_URL, body=b"<html>Not found</html>")

        with pytest.raises(ExtractionFailed):
            await installer.install(request_)

    assert not request_.artifact_dir.exists()
    assert leftovers(request_.destination_root) == []


@pytest.mark.asyncio
async def test_install_rejects_escaping_members(
    installer: HttpInstaller, request_: AcquisitionRequest, nupkg_factory
) -> None:
    """Test that archive members cannot leave the extraction directory."""
    with aioresponses() as mock:
        mock.get(PACKAGE_URL, body=nupkg_factory({"../../evil.txt": "boom"}))

        with pytest.raises(ExtractionFailed):
            await installer.install(request_)

    assert not (request_.destination_root.parent / "evil.txt").exists()
    assert not request_.artifact_dir.exists()
