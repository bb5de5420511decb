"""Scanner for dedicated notice.toml configuration files."""

import tomllib
from pathlib import Path

from notice_tracker.models import Workspace
from notice_tracker.scanners.base import BaseScanner


class NoticeTomlScanner(BaseScanner):
    """Scanner for notice.toml files.

    The whole document is the notice configuration: an optional ``output``
    key and ``[[unit]]`` tables.
    """

    def scan(self) -> Workspace:
        """Scan notice.toml and extract the workspace units.

        Returns:
            Workspace with its units in declaration order.

        Raises:
            FileNotFoundError: If the source file does not exist.
            ValueError: If the source format is invalid or source_path is not set.
        """
        if self.source_path is None:
            raise ValueError("source_path must be set before calling scan()")

        if not self.source_path.exists():
            raise FileNotFoundError(f"Notice configuration not found: {self.source_path}")

        try:
            with open(self.source_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {self.source_path}: {e}") from e

        return self._workspace_from_table(data)

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if the file is named "notice.toml", False otherwise.
        """
        return path.name == "notice.toml"

    @property
    def source_name(self) -> str:
        return "notice.toml"
