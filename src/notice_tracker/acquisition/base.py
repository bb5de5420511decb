"""Base interface for artifact installers.

Installers are responsible for placing the extracted content of an
artifact into a local directory, either through a package manager CLI or
by downloading the archive directly.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from notice_tracker.models import AcquisitionRequest


class BaseInstaller(ABC):
    """Abstract base class for artifact installers.

    Installers raise an AcquisitionError subclass on failure. They are
    async so that the subprocess and HTTP channels share one event loop.
    """

    @abstractmethod
    async def install(self, request: AcquisitionRequest) -> Path:
        """Install an artifact.

        Args:
            request: Coordinates and destination of the artifact.

        Returns:
            Absolute path of the extracted artifact directory.

        Raises:
            AcquisitionError: If the artifact could not be installed.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the installer name for logging/debugging.

        Returns:
            Name like "nuget", "HTTP", etc.
        """
        ...
