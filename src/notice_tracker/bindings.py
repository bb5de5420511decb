"""Boundary with the external binding generator.

Binding generation (header translation) is not implemented here. The
pipeline only hands over the path of a header from the artifact and the
target triple, and writes whatever artifact comes back.
"""

from pathlib import Path
from typing import Optional, Protocol


class BindingsArtifact(Protocol):
    """Generated bindings, ready to be written."""

    def write_to_file(self, path: Path) -> None:
        ...


class BindingGenerator(Protocol):
    """Translates a header file into bindings for a target platform."""

    def generate(self, header_path: Path, target: Optional[str]) -> BindingsArtifact:
        ...
