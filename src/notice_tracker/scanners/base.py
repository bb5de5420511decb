"""Base interface for workspace scanners.

Scanners read the workspace configuration and return the units that
ship third party files, together with their declared dependencies.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from notice_tracker.models import (
    BindingSpec,
    DependencySpec,
    StagedFileSpec,
    Workspace,
    WorkspaceUnit,
)


class BaseScanner(ABC):
    """Abstract base class for workspace scanners.

    Subclasses locate the notice configuration table inside their file
    format; the table layout itself is shared and parsed here.

    Attributes:
        source_path: Optional path to the file being scanned.
    """

    def __init__(self, source_path: Optional[Path] = None) -> None:
        """Initialize the scanner.

        Args:
            source_path: Optional path to the configuration file.
        """
        self.source_path = source_path

    @abstractmethod
    def scan(self) -> Workspace:
        """Scan the source and extract the workspace units.

        Returns:
            Workspace with its units in declaration order.

        Raises:
            FileNotFoundError: If the source file does not exist.
            ValueError: If the source format is invalid.
        """
        ...

    @classmethod
    @abstractmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if this scanner can process the file, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return a human-readable name for this scanner's source type.

        Returns:
            Name like "notice.toml", "pyproject.toml", etc.
        """
        ...

    def _workspace_from_table(self, table: dict[str, Any]) -> Workspace:
        """Build a Workspace from the notice configuration table.

        Relative paths are resolved against the directory of the source file.
        """
        root = self.source_path.parent.resolve()
        output = table.get("output")
        units = [self._parse_unit(unit, root) for unit in table.get("unit", [])]
        return Workspace(
            root=root,
            units=units,
            output=root / output if output else None,
        )

    def _parse_unit(self, unit: dict[str, Any], root: Path) -> WorkspaceUnit:
        name = self._require(unit, "name", "unit")
        unit_root = root / unit.get("path", ".")
        notice = unit.get("notice")
        return WorkspaceUnit(
            name=name,
            root=unit_root,
            dependencies=[
                self._parse_dependency(dependency, name)
                for dependency in unit.get("dependency", [])
            ],
            notice_path=unit_root / notice if notice else None,
        )

    def _parse_dependency(self, dependency: dict[str, Any], unit_name: str) -> DependencySpec:
        context = f"dependency of unit '{unit_name}'"
        name = self._require(dependency, "name", context)
        version = self._require(dependency, "version", context)

        files = tuple(
            StagedFileSpec(
                source=self._require(file, "source", f"file of {name}"),
                destination=file.get("destination"),
                replacements=tuple(
                    (str(old), str(new))
                    for old, new in file.get("replacements", {}).items()
                ),
            )
            for file in dependency.get("file", [])
        )

        bindings = None
        if "bindings" in dependency:
            table = dependency["bindings"]
            bindings = BindingSpec(
                header=self._require(table, "header", f"bindings of {name}"),
                output=self._require(table, "output", f"bindings of {name}"),
            )

        return DependencySpec(
            name=name,
            version=str(version),
            link=dependency.get("link"),
            files=files,
            bindings=bindings,
        )

    def _require(self, table: dict[str, Any], key: str, context: str) -> Any:
        if key not in table:
            raise ValueError(
                f"{context.capitalize()} missing required field '{key}' in {self.source_path}"
            )
        return table[key]
