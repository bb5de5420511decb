"""Acquisition orchestrating the primary and fallback installers.

This module implements the acquisition modes: the package manager CLI is
tried first and, when it fails, the artifact is downloaded directly.
"""

import logging
from pathlib import Path
from typing import Optional

from notice_tracker.acquisition.base import BaseInstaller
from notice_tracker.acquisition.http import HttpInstaller
from notice_tracker.acquisition.nuget import NuGetCliInstaller
from notice_tracker.config import NoticeTrackerSettings
from notice_tracker.exceptions import AcquisitionError
from notice_tracker.models import AcquisitionMode, AcquisitionRequest


class ArtifactAcquirer:
    """Resolves (name, version) pairs to extracted artifact directories.

    Acquisition strategy:
    1. PRIMARY_ONLY: run the primary installer, its failure is fatal.
    2. FALLBACK_ONLY: run the fallback installer, its failure is fatal.
    3. PREFER_PRIMARY: run the primary installer; on any AcquisitionError,
       log it and run the fallback. Only the fallback's error reaches the
       caller.

    Attributes:
        primary: Installer of the primary channel.
        fallback: Installer of the fallback channel.
        skip_existing: Reuse an artifact directory that already holds a
            manifest or package archive.
    """

    def __init__(
        self,
        primary: Optional[BaseInstaller] = None,
        fallback: Optional[BaseInstaller] = None,
        skip_existing: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the acquirer with optional custom installers.

        Args:
            primary: Optional custom primary installer. Defaults to the NuGet CLI.
            fallback: Optional custom fallback installer. Defaults to HTTP download.
            skip_existing: Short-circuit when the artifact is already present.
            logger: Logger to report to. Defaults to the module logger.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.primary = primary or NuGetCliInstaller(logger=self.logger)
        self.fallback = fallback or HttpInstaller(logger=self.logger)
        self.skip_existing = skip_existing

    @classmethod
    def from_settings(
        cls, settings: NoticeTrackerSettings, logger: Optional[logging.Logger] = None
    ) -> "ArtifactAcquirer":
        """Build an acquirer configured from settings."""
        logger = logger or logging.getLogger(__name__)
        return cls(
            primary=NuGetCliInstaller(settings.nuget_executable, logger=logger),
            fallback=HttpInstaller(
                settings.download_url_template,
                timeout=settings.http_timeout,
                logger=logger,
            ),
            skip_existing=settings.skip_existing,
            logger=logger,
        )

    async def acquire(
        self,
        name: str,
        version: str,
        destination_root: Path,
        mode: AcquisitionMode = AcquisitionMode.PREFER_PRIMARY,
    ) -> Path:
        """Acquire an artifact.

        Args:
            name: Package identifier.
            version: Package version.
            destination_root: Directory receiving ``<name>.<version>``.
            mode: Channel selection.

        Returns:
            Absolute path of the extracted artifact directory.

        Raises:
            AcquisitionError: If the selected channel(s) failed.
        """
        request = AcquisitionRequest(
            name=name,
            version=version,
            destination_root=Path(destination_root),
            mode=mode,
        )
        return await self.acquire_request(request)

    async def acquire_request(self, request: AcquisitionRequest) -> Path:
        """Acquire the artifact described by ``request``."""
        artifact_dir = request.artifact_dir.resolve()
        if self.skip_existing and _is_extracted(artifact_dir):
            self.logger.debug("Reusing existing artifact at %s", artifact_dir)
            return artifact_dir

        if request.mode is AcquisitionMode.PRIMARY_ONLY:
            return await self.primary.install(request)

        if request.mode is AcquisitionMode.FALLBACK_ONLY:
            return await self.fallback.install(request)

        try:
            return await self.primary.install(request)
        except AcquisitionError as e:
            self.logger.warning(
                "%s failed for %s %s: %s. Falling back to %s",
                self.primary.name,
                request.name,
                request.version,
                e,
                self.fallback.name,
            )

        return await self.fallback.install(request)

    async def close(self) -> None:
        """Close resources held by the installers (like HTTP sessions)."""
        for installer in (self.primary, self.fallback):
            close = getattr(installer, "close", None)
            if close is not None:
                await close()

    async def __aenter__(self) -> "ArtifactAcquirer":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


def _is_extracted(artifact_dir: Path) -> bool:
    if not artifact_dir.is_dir():
        return False
    return any(
        path.suffix.lower() in (".nuspec", ".nupkg") for path in artifact_dir.iterdir()
    )
