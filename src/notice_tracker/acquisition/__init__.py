"""Artifact acquisition through the NuGet CLI or a direct download.

This module provides the installers of both channels and the acquirer
that selects between them.
"""

from notice_tracker.acquisition.acquirer import ArtifactAcquirer
from notice_tracker.acquisition.base import BaseInstaller
from notice_tracker.acquisition.http import HttpInstaller
from notice_tracker.acquisition.nuget import NuGetCliInstaller

__all__ = [
    "ArtifactAcquirer",
    "BaseInstaller",
    "HttpInstaller",
    "NuGetCliInstaller",
]
