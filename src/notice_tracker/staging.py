"""Staging of distributed files with provenance records.

Every function copies or writes one file and returns the DistributedFile
describing how its bytes were produced.
"""

import shutil
from pathlib import Path
from typing import Iterable

from notice_tracker.models import DistributedFile, FileStatus


def copy_unmodified(source: Path, destination: Path) -> DistributedFile:
    """Copy a file verbatim.

    Raises:
        OSError: If the file cannot be copied.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)
    return DistributedFile(destination, FileStatus.UNMODIFIED)


def copy_with_replacements(
    source: Path,
    destination: Path,
    replacements: Iterable[tuple[str, str]],
) -> DistributedFile:
    """Copy a text file, applying literal substitutions on the way.

    The file is recorded as modified only when a substitution actually
    changed its content.

    Raises:
        OSError: If the file cannot be read or written.
        UnicodeDecodeError: If the source is not UTF-8 text.
    """
    original = source.read_bytes().decode("utf-8")
    content = original
    for old, new in replacements:
        content = content.replace(old, new)

    destination.parent.mkdir(parents=True, exist_ok=True)
    if content == original:
        shutil.copyfile(source, destination)
        return DistributedFile(destination, FileStatus.UNMODIFIED)

    destination.write_bytes(content.encode("utf-8"))
    return DistributedFile(destination, FileStatus.MODIFIED)


def write_generated(destination: Path, content: str) -> DistributedFile:
    """Write a file synthesized from package metadata.

    Raises:
        OSError: If the file cannot be written.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(content.encode("utf-8"))
    return DistributedFile(destination, FileStatus.PACKAGE_METADATA_GENERATED)
