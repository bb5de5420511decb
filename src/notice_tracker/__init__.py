"""Notice Tracker - Third party notice generation for native package dependencies.

This package acquires the package artifacts declared by a workspace,
reads their manifests, stages the distributed files with their provenance
and generates third party notice documentation.
"""

__version__ = "0.1.0"

from notice_tracker.models import (
    AcquisitionMode,
    DependencySpec,
    DistributedFile,
    FileStatus,
    Manifest,
    ThirdPartyNotice,
    ThirdPartyNoticeItem,
    ThirdPartyNoticePackage,
    Workspace,
    WorkspaceUnit,
)

__all__ = [
    "__version__",
    "AcquisitionMode",
    "DependencySpec",
    "DistributedFile",
    "FileStatus",
    "Manifest",
    "ThirdPartyNotice",
    "ThirdPartyNoticeItem",
    "ThirdPartyNoticePackage",
    "Workspace",
    "WorkspaceUnit",
]
