"""Fallback acquisition channel: download the archive over HTTP and extract it."""

import asyncio
import logging
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import IO, Optional

import aiohttp

from notice_tracker.acquisition.base import BaseInstaller
from notice_tracker.config import DEFAULT_DOWNLOAD_URL_TEMPLATE
from notice_tracker.exceptions import (
    AcquisitionIOError,
    DownloadFailed,
    ExtractionFailed,
)
from notice_tracker.models import AcquisitionRequest


class HttpInstaller(BaseInstaller):
    """Installer that downloads the artifact archive and extracts it.

    The response body is streamed into a temporary file which is removed on
    every exit path. Extraction happens in a sibling temporary directory
    that is renamed to ``<name>.<version>`` only once complete, so a failed
    extraction never leaves a directory that looks like a finished artifact.

    Manages a shared aiohttp.ClientSession for connection reuse. Use as an
    async context manager or call close() when done.

    Attributes:
        url_template: Download URL formatted with ``name`` and ``version``.
        timeout: Optional total timeout in seconds.
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        url_template: str = DEFAULT_DOWNLOAD_URL_TEMPLATE,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the HttpInstaller.

        Args:
            url_template: Download URL template.
            timeout: Total timeout in seconds, None for the aiohttp default.
            logger: Logger to report to. Defaults to the module logger.
        """
        self.url_template = url_template
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "HTTP"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Returns:
            The shared aiohttp ClientSession.
        """
        if self._session is None or self._session.closed:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> aiohttp.ClientSession:
        """Create a new aiohttp.ClientSession.

        Returns:
            A new aiohttp.ClientSession instance.
        """
        if self.timeout is not None:
            return aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return aiohttp.ClientSession()

    async def close(self) -> None:
        """Close the aiohttp session.

        Should be called when done using the installer to release resources.
        """
        if self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "HttpInstaller":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def build_url(self, request: AcquisitionRequest) -> str:
        """Return the download URL of a request."""
        return self.url_template.format(name=request.name, version=request.version)

    async def install(self, request: AcquisitionRequest) -> Path:
        """Download and extract an artifact.

        Args:
            request: Coordinates and destination of the artifact.

        Returns:
            Absolute path of the extracted artifact directory.

        Raises:
            DownloadFailed: On a non-2xx status or a transport error.
            ExtractionFailed: If the body is not a valid zip archive.
            AcquisitionIOError: On local filesystem errors.
        """
        url = self.build_url(request)
        destination_root = request.destination_root.resolve()
        artifact_dir = destination_root / f"{request.name}.{request.version}"

        try:
            destination_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise AcquisitionIOError(f"Cannot create {destination_root}: {e}") from e

        self.logger.info("Downloading %s %s from %s", request.name, request.version, url)
        with tempfile.NamedTemporaryFile(suffix=".nupkg") as archive_file:
            await self._download(url, archive_file)
            self.logger.info("Extracting %s to %s", url, artifact_dir)
            self._extract(archive_file, artifact_dir)

        return artifact_dir

    async def _download(self, url: str, archive_file: IO[bytes]) -> None:
        """Stream the response body of ``url`` into ``archive_file``."""
        try:
            session = await self._get_session()
            async with session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise DownloadFailed(
                        f"GET {url} returned HTTP {response.status}",
                        status=response.status,
                    )
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    archive_file.write(chunk)
            archive_file.flush()
        except aiohttp.ClientError as e:
            raise DownloadFailed(f"Network error downloading {url}: {e}") from e
        except asyncio.TimeoutError as e:
            raise DownloadFailed(f"Timed out downloading {url}") from e
        except OSError as e:
            raise AcquisitionIOError(f"Cannot buffer download of {url}: {e}") from e

    def _extract(self, archive_file: IO[bytes], artifact_dir: Path) -> None:
        """Extract the archive into ``artifact_dir``, replacing a previous copy."""
        archive_file.seek(0)
        try:
            partial_dir = Path(
                tempfile.mkdtemp(
                    prefix=f".{artifact_dir.name}.",
                    suffix=".partial",
                    dir=artifact_dir.parent,
                )
            )
        except OSError as e:
            raise AcquisitionIOError(f"Cannot extract to {artifact_dir.parent}: {e}") from e

        try:
            try:
                with zipfile.ZipFile(archive_file) as archive:
                    _check_members(archive, partial_dir)
                    archive.extractall(partial_dir)
            except zipfile.BadZipFile as e:
                raise ExtractionFailed(f"Downloaded artifact is not a zip archive: {e}") from e

            if artifact_dir.exists():
                shutil.rmtree(artifact_dir)
            partial_dir.rename(artifact_dir)
        except OSError as e:
            raise AcquisitionIOError(f"Cannot extract to {artifact_dir}: {e}") from e
        finally:
            if partial_dir.exists():
                shutil.rmtree(partial_dir, ignore_errors=True)


def _check_members(archive: zipfile.ZipFile, target_dir: Path) -> None:
    """Reject archive members that would land outside ``target_dir``."""
    root = target_dir.resolve()
    for member in archive.namelist():
        if not (root / member).resolve().is_relative_to(root):
            raise ExtractionFailed(f"Archive member escapes extraction directory: {member}")
