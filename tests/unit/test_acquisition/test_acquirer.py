"""Tests for the acquisition mode orchestration."""

from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from notice_tracker.acquisition import ArtifactAcquirer, BaseInstaller
from notice_tracker.exceptions import DownloadFailed, PrimaryToolFailed
from notice_tracker.models import AcquisitionMode, AcquisitionRequest


class FakeInstaller(BaseInstaller):
    """Installer returning a fixed result or raising a fixed error."""

    def __init__(self, name: str, error: Optional[Exception] = None) -> None:
        self._name = name
        self.error = error
        self.requests: list[AcquisitionRequest] = []

    @property
    def name(self) -> str:
        return self._name

    async def install(self, request: AcquisitionRequest) -> Path:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return request.artifact_dir / self._name


@pytest.fixture
def failing_primary() -> FakeInstaller:
    """Return a primary installer that always fails."""
    return FakeInstaller("primary", PrimaryToolFailed("nuget not found"))


class TestArtifactAcquirer:
    """Test suite for ArtifactAcquirer."""

    @pytest.mark.asyncio
    async def test_prefer_primary_uses_primary(self, tmp_path: Path) -> None:
        """Test that a working primary channel is used alone."""
        primary = FakeInstaller("primary")
        fallback = FakeInstaller("fallback")
        acquirer = ArtifactAcquirer(primary=primary, fallback=fallback)

        path = await acquirer.acquire("Acme.Widget", "1.0.0", tmp_path)

        assert path == tmp_path / "Acme.Widget.1.0.0" / "primary"
        assert fallback.requests == []

    @pytest.mark.asyncio
    async def test_prefer_primary_falls_back(
        self, tmp_path: Path, failing_primary: FakeInstaller, caplog
    ) -> None:
        """Test that a failing primary channel falls back."""
        fallback = FakeInstaller("fallback")
        acquirer = ArtifactAcquirer(primary=failing_primary, fallback=fallback)

        with caplog.at_level("WARNING"):
            path = await acquirer.acquire("Acme.Widget", "1.0.0", tmp_path)

        assert path == tmp_path / "Acme.Widget.1.0.0" / "fallback"
        assert len(failing_primary.requests) == 1
        assert "nuget not found" in caplog.text

    @pytest.mark.asyncio
    async def test_prefer_primary_reports_fallback_error(
        self, tmp_path: Path, failing_primary: FakeInstaller
    ) -> None:
        """Test that only the fallback error reaches the caller."""
        fallback = FakeInstaller("fallback", DownloadFailed("HTTP 404", status=404))
        acquirer = ArtifactAcquirer(primary=failing_primary, fallback=fallback)

        with pytest.raises(DownloadFailed) as exc_info:
            await acquirer.acquire("Acme.Widget", "1.0.0", tmp_path)

        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_primary_only_does_not_fall_back(
        self, tmp_path: Path, failing_primary: FakeInstaller
    ) -> None:
        """Test that PRIMARY_ONLY propagates the primary error."""
        fallback = FakeInstaller("fallback")
        acquirer = ArtifactAcquirer(primary=failing_primary, fallback=fallback)

        with pytest.raises(PrimaryToolFailed):
            await acquirer.acquire(
                "Acme.Widget", "1.0.0", tmp_path, AcquisitionMode.PRIMARY_ONLY
            )

        assert fallback.requests == []

    @pytest.mark.asyncio
    async def test_fallback_only_skips_primary(self, tmp_path: Path) -> None:
        """Test that FALLBACK_ONLY never runs the primary channel."""
        primary = FakeInstaller("primary")
        fallback = FakeInstaller("fallback")
        acquirer = ArtifactAcquirer(primary=primary, fallback=fallback)

        await acquirer.acquire("Acme.Widget", "1.0.0", tmp_path, AcquisitionMode.FALLBACK_ONLY)

        assert primary.requests == []
        assert fallback.requests[0].mode is AcquisitionMode.FALLBACK_ONLY

    @pytest.mark.asyncio
    async def test_skip_existing_reuses_artifact(self, widget_artifact: Path) -> None:
        """Test the optional presence check."""
        primary = FakeInstaller("primary")
        acquirer = ArtifactAcquirer(primary=primary, skip_existing=True)

        path = await acquirer.acquire("Acme.Widget", "1.0.0", widget_artifact.parent)

        assert path == widget_artifact.resolve()
        assert primary.requests == []

    @pytest.mark.asyncio
    async def test_existing_artifact_is_acquired_again_by_default(
        self, widget_artifact: Path
    ) -> None:
        """Test that the presence check is off by default."""
        primary = FakeInstaller("primary")
        acquirer = ArtifactAcquirer(primary=primary)

        await acquirer.acquire("Acme.Widget", "1.0.0", widget_artifact.parent)

        assert len(primary.requests) == 1

    @pytest.mark.asyncio
    async def test_context_manager_closes_installers(self) -> None:
        """Test that installer resources are released."""
        primary = FakeInstaller("primary")
        fallback = FakeInstaller("fallback")
        fallback.close = AsyncMock()

        async with ArtifactAcquirer(primary=primary, fallback=fallback):
            pass

        fallback.close.assert_awaited_once()
