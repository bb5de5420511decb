"""License resolution for parsed manifests.

Turns the license declaration of a manifest into renderable license
content: a generated body for SPDX expressions, the literal text of a
license file, or a bare URL for legacy manifests.
"""

import logging
from pathlib import Path
from typing import Optional

from license_expression import Licensing

from notice_tracker.exceptions import FileUnreadable
from notice_tracker.licensing.expression import SPDX, parse_expression
from notice_tracker.models import (
    GeneratedLicense,
    LicenseContent,
    LicenseDescriptor,
    LicenseKind,
    LicenseUrl,
    LiteralLicense,
    Manifest,
)


class LicenseResolver:
    """Resolves the license content of a manifest.

    Resolution order:
    1. License element: an expression yields a GeneratedLicense once it
       validates, a file yields a LiteralLicense read eagerly.
    2. License URL: yields a LicenseUrl.
    3. Nothing declared: None.

    The URL is never consulted when the manifest has a license element.
    """

    def __init__(
        self,
        licensing: Optional[Licensing] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.licensing = licensing or SPDX
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, manifest: Manifest, artifact_dir: Path) -> Optional[LicenseContent]:
        """Resolve the license content of a manifest.

        Args:
            manifest: Parsed manifest.
            artifact_dir: Extracted artifact, base of license file paths.

        Returns:
            The license content, or None if the manifest declares none.

        Raises:
            InvalidExpression: If the license expression does not validate.
            FileUnreadable: If the license file cannot be read.
        """
        if manifest.license is not None:
            return self._resolve_descriptor(manifest, manifest.license, artifact_dir)

        if manifest.license_url:
            self.logger.debug("%s only declares a license URL", manifest.id)
            return LicenseUrl(manifest.license_url)

        self.logger.debug("%s declares no license", manifest.id)
        return None

    def _resolve_descriptor(
        self, manifest: Manifest, descriptor: LicenseDescriptor, artifact_dir: Path
    ) -> LicenseContent:
        if descriptor.kind is LicenseKind.EXPRESSION:
            parse_expression(descriptor.value, self.licensing)
            return GeneratedLicense(
                expression=descriptor.value,
                year=manifest.year(),
                holders=manifest.holders(),
            )

        path = self._license_file_path(descriptor.value, artifact_dir)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileUnreadable(f"Cannot read license file {path}: {e}") from e
        return LiteralLicense(text=text, path=path)

    def _license_file_path(self, value: str, artifact_dir: Path) -> Path:
        """Return the license file path, which must stay inside the artifact."""
        root = artifact_dir.resolve()
        path = (root / value.replace("\\", "/")).resolve()
        if not path.is_relative_to(root):
            raise FileUnreadable(f"License file '{value}' is outside of {root}")
        return path
