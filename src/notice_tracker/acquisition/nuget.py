"""Primary acquisition channel backed by the NuGet command line tool."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from notice_tracker.acquisition.base import BaseInstaller
from notice_tracker.exceptions import AcquisitionIOError, PrimaryToolFailed
from notice_tracker.models import AcquisitionRequest


class NuGetCliInstaller(BaseInstaller):
    """Installer that shells out to ``nuget install``.

    The tool writes the package to ``<destination_root>/<name>.<version>``,
    which is the same layout the HTTP installer produces. Success is
    defined by exit status 0 only.

    Attributes:
        executable: Name or path of the NuGet CLI.
    """

    def __init__(
        self, executable: str = "nuget", logger: Optional[logging.Logger] = None
    ) -> None:
        """Initialize the installer.

        Args:
            executable: Name or path of the NuGet CLI.
            logger: Logger to report to. Defaults to the module logger.
        """
        self.executable = executable
        self.logger = logger or logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return "nuget"

    def build_command(self, request: AcquisitionRequest, output_dir: Path) -> list[str]:
        """Return the command line for a request."""
        return [
            self.executable,
            "install",
            request.name,
            "-Version",
            request.version,
            "-OutputDirectory",
            str(output_dir),
            "-NonInteractive",
        ]

    async def install(self, request: AcquisitionRequest) -> Path:
        """Install an artifact with the NuGet CLI.

        Args:
            request: Coordinates and destination of the artifact.

        Returns:
            Absolute path of the installed package directory.

        Raises:
            PrimaryToolFailed: If the tool cannot be started or exits non-zero.
            AcquisitionIOError: If the output directory cannot be created.
        """
        output_dir = request.destination_root.resolve()
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise AcquisitionIOError(f"Cannot create {output_dir}: {e}") from e

        command = self.build_command(request, output_dir)
        self.logger.info(
            "Installing %s %s using %s", request.name, request.version, self.executable
        )
        self.logger.debug("Running: %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise PrimaryToolFailed(f"Could not run {self.executable}: {e}") from e

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            self.logger.debug(
                "%s output:\n%s%s",
                self.executable,
                stdout.decode(errors="replace"),
                stderr.decode(errors="replace"),
            )
            raise PrimaryToolFailed(
                f"{self.executable} install failed with exit code {process.returncode}",
                exit_code=process.returncode,
            )

        return output_dir / f"{request.name}.{request.version}"
