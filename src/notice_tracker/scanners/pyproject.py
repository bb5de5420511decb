"""Scanner for the [tool.notice-tracker] table of pyproject.toml."""

import tomllib
from pathlib import Path

from notice_tracker.models import Workspace
from notice_tracker.scanners.base import BaseScanner

TOOL_TABLE = "notice-tracker"


class PyprojectScanner(BaseScanner):
    """Scanner for pyproject.toml files.

    Reads the ``[tool.notice-tracker]`` table, which uses the same layout
    as notice.toml. A pyproject.toml without that table yields an empty
    workspace.
    """

    def scan(self) -> Workspace:
        """Scan pyproject.toml and extract the workspace units.

        Returns:
            Workspace with its units in declaration order.

        Raises:
            FileNotFoundError: If the source file does not exist.
            ValueError: If the source format is invalid or source_path is not set.
        """
        if self.source_path is None:
            raise ValueError("source_path must be set before calling scan()")

        if not self.source_path.exists():
            raise FileNotFoundError(f"pyproject.toml not found: {self.source_path}")

        try:
            with open(self.source_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {self.source_path}: {e}") from e

        table = data.get("tool", {}).get(TOOL_TABLE, {})
        return self._workspace_from_table(table)

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if the file is named "pyproject.toml", False otherwise.
        """
        return path.name == "pyproject.toml"

    @property
    def source_name(self) -> str:
        return "pyproject.toml"
