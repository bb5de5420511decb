"""Workspace scanners for notice configuration files.

This module provides scanners that discover the workspace units and their
third party dependencies.
"""

from pathlib import Path

from notice_tracker.scanners.base import BaseScanner
from notice_tracker.scanners.notice_toml import NoticeTomlScanner
from notice_tracker.scanners.pyproject import PyprojectScanner

__all__ = [
    "BaseScanner",
    "NoticeTomlScanner",
    "PyprojectScanner",
    "get_scanner",
]

# Registry of available scanners in priority order
_SCANNERS: list[type[BaseScanner]] = [
    NoticeTomlScanner,
    PyprojectScanner,
]


def get_scanner(path: Path) -> BaseScanner:
    """Get the appropriate scanner for a given file path.

    Auto-detects the file type based on filename and returns the
    appropriate scanner instance.

    Args:
        path: Path to the configuration file.

    Returns:
        Scanner instance configured for the given file.

    Raises:
        ValueError: If no scanner can handle the given file.
    """
    for scanner_cls in _SCANNERS:
        if scanner_cls.can_handle(path):
            return scanner_cls(path)

    raise ValueError(
        f"No scanner available for '{path.name}'. "
        f"Supported files: notice.toml, pyproject.toml"
    )
