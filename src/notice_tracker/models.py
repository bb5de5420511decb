"""Core data models for notice_tracker.

This module defines the fundamental data structures used throughout the
notice generation pipeline: workspace declarations, acquisition requests,
the parsed package manifest, resolved license content, provenance records
and the third party notice tree.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

_YEAR_PATTERN = re.compile(r"\d{4}")


class AcquisitionMode(str, Enum):
    """How an artifact is acquired.

    PREFER_PRIMARY tries the package manager CLI first and falls back to a
    direct download. PRIMARY_ONLY and FALLBACK_ONLY use a single channel.
    """

    PREFER_PRIMARY = "prefer-primary"
    PRIMARY_ONLY = "primary-only"
    FALLBACK_ONLY = "fallback-only"


@dataclass(frozen=True)
class AcquisitionRequest:
    """Immutable request to acquire one artifact.

    Attributes:
        name: Package identifier (e.g., "Microsoft.WSL.PluginApi").
        version: Exact package version (e.g., "2.4.4").
        destination_root: Directory receiving the extracted artifact.
        mode: Acquisition channel selection.
    """

    name: str
    version: str
    destination_root: Path
    mode: AcquisitionMode = AcquisitionMode.PREFER_PRIMARY

    @property
    def artifact_dir(self) -> Path:
        """Return the directory the artifact is extracted into."""
        return self.destination_root / f"{self.name}.{self.version}"


@dataclass(frozen=True)
class StagedFileSpec:
    """A file to copy from an artifact into the staging directory.

    Attributes:
        source: Path relative to the artifact root.
        destination: Path relative to the staging directory. Defaults to
            the source file name.
        replacements: Literal text substitutions applied while copying.
    """

    source: str
    destination: Optional[str] = None
    replacements: tuple[tuple[str, str], ...] = ()

    @property
    def destination_path(self) -> str:
        return self.destination or Path(self.source).name


@dataclass(frozen=True)
class BindingSpec:
    """Hand-off of an artifact header to the binding generator."""

    header: str
    output: str


@dataclass(frozen=True)
class DependencySpec:
    """Immutable declaration of a third party dependency.

    Frozen for hashability, in the same way as the scanners' results are
    used as dictionary keys.

    Attributes:
        name: Package identifier.
        version: Exact version string.
        link: Optional source link shown in the notice.
        files: Files staged from the artifact.
        bindings: Optional header hand-off to the binding generator.
    """

    name: str
    version: str
    link: Optional[str] = None
    files: tuple[StagedFileSpec, ...] = ()
    bindings: Optional[BindingSpec] = None


@dataclass
class WorkspaceUnit:
    """A unit of the workspace that ships third party files.

    Attributes:
        name: Unit name, used as the package heading in the notice.
        root: Unit root directory.
        dependencies: Declared dependencies, in declaration order.
        notice_path: Optional per-unit notice document.
    """

    name: str
    root: Path
    dependencies: list[DependencySpec] = field(default_factory=list)
    notice_path: Optional[Path] = None


@dataclass
class Workspace:
    """Units discovered by a scanner.

    Attributes:
        root: Directory of the scanned configuration file.
        units: Workspace units, in declaration order.
        output: Optional workspace-level notice document.
    """

    root: Path
    units: list[WorkspaceUnit] = field(default_factory=list)
    output: Optional[Path] = None


class LicenseKind(str, Enum):
    """Kind of the license element of a manifest."""

    EXPRESSION = "expression"
    FILE = "file"


@dataclass(frozen=True)
class LicenseDescriptor:
    """License declaration: an SPDX expression or a file inside the artifact."""

    kind: LicenseKind
    value: str


@dataclass(frozen=True)
class ManifestDependency:
    """A dependency declared by a manifest. Kept for completeness only."""

    id: str
    version: str
    exclude: Optional[str] = None
    target_framework: Optional[str] = None


@dataclass(frozen=True)
class Manifest:
    """Package metadata read from the artifact's manifest.

    Attributes:
        id: Package identifier.
        version: Package version.
        authors: Comma separated authors.
        description: Package description.
        owners: Optional owners, preferred over authors as license holders.
        copyright: Optional copyright statement.
        readme: Optional readme path inside the artifact.
        license: Optional license descriptor.
        license_url: Optional license URL (legacy manifests).
        project_url: Optional project URL.
        release_notes: Optional release notes.
        tags: Optional space separated tags.
        require_license_acceptance: Optional license acceptance flag.
        dependencies: Declared dependencies (all groups flattened).
    """

    id: str
    version: str
    authors: str
    description: str
    owners: Optional[str] = None
    copyright: Optional[str] = None
    readme: Optional[str] = None
    license: Optional[LicenseDescriptor] = None
    license_url: Optional[str] = None
    project_url: Optional[str] = None
    release_notes: Optional[str] = None
    tags: Optional[str] = None
    require_license_acceptance: Optional[bool] = None
    dependencies: tuple[ManifestDependency, ...] = ()

    def holders(self) -> str:
        """Return the copyright holders: owners if present, else authors."""
        return self.owners if self.owners is not None else self.authors

    def year(self) -> Optional[int]:
        """Return the first 4-digit run of the copyright statement, if any."""
        if not self.copyright:
            return None
        match = _YEAR_PATTERN.search(self.copyright)
        return int(match.group(0)) if match else None


@dataclass(frozen=True)
class GeneratedLicense:
    """License body synthesized from an SPDX expression on demand."""

    expression: str
    year: Optional[int]
    holders: str


@dataclass(frozen=True)
class LiteralLicense:
    """License body read verbatim from a file of the artifact."""

    text: str
    path: Optional[Path] = None


@dataclass(frozen=True)
class LicenseUrl:
    """License given only as a URL reference."""

    url: str


LicenseBody = Union[GeneratedLicense, LiteralLicense]
LicenseContent = Union[GeneratedLicense, LiteralLicense, LicenseUrl]


class FileStatus(Enum):
    """How the bytes of a distributed file were produced."""

    MODIFIED = "modified"
    UNMODIFIED = "unmodified"
    PACKAGE_METADATA_GENERATED = "generated from package metadata"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DistributedFile:
    """Provenance record of a file copied or synthesized during staging.

    Attributes:
        path: Destination path of the file.
        status: How the file content was produced.
    """

    path: Path
    status: FileStatus

    def __post_init__(self) -> None:
        if not str(self.path):
            raise ValueError("DistributedFile path must not be empty")
        # Path("") collapses to ".", so the check above runs first
        object.__setattr__(self, "path", Path(self.path))


@dataclass
class ThirdPartyNoticeItem:
    """Disclosure of one third party dependency.

    Files keep insertion order, which is the processing order.
    """

    name: str
    version: str
    link: str
    copyright: Optional[str] = None
    license: Optional[LicenseContent] = None
    files: list[DistributedFile] = field(default_factory=list)

    def add_file(self, file: DistributedFile) -> None:
        self.files.append(file)

    def extend(self, files: Iterable[DistributedFile]) -> None:
        self.files.extend(files)

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[DistributedFile]:
        return iter(self.files)


@dataclass
class ThirdPartyNoticePackage:
    """All notice items of one workspace unit."""

    name: str
    items: list[ThirdPartyNoticeItem] = field(default_factory=list)

    def append(self, item: ThirdPartyNoticeItem) -> None:
        self.items.append(item)

    def extend(self, items: Iterable[ThirdPartyNoticeItem]) -> None:
        self.items.extend(items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ThirdPartyNoticeItem]:
        return iter(self.items)


@dataclass
class ThirdPartyNotice:
    """Root of the notice document."""

    packages: list[ThirdPartyNoticePackage] = field(default_factory=list)

    def append(self, package: ThirdPartyNoticePackage) -> None:
        self.packages.append(package)

    def extend(self, packages: Iterable[ThirdPartyNoticePackage]) -> None:
        self.packages.extend(packages)

    def __len__(self) -> int:
        return len(self.packages)

    def __iter__(self) -> Iterator[ThirdPartyNoticePackage]:
        return iter(self.packages)
