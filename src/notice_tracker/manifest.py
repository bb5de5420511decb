"""Parser for package manifests (nuspec documents).

The manifest is an XML document whose ``<metadata>`` element describes the
package: identity, authorship, copyright and license. Every nuspec schema
version uses its own XML namespace, so elements are matched by local name.
"""

import logging
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path
from typing import BinaryIO, Optional, Union

from notice_tracker.exceptions import MalformedDocument, MissingField
from notice_tracker.models import (
    LicenseDescriptor,
    LicenseKind,
    Manifest,
    ManifestDependency,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "version", "authors", "description")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element) -> dict[str, ET.Element]:
    """Map the local names of direct children to the first matching element."""
    children: dict[str, ET.Element] = {}
    for child in element:
        children.setdefault(_local_name(child.tag), child)
    return children


def _text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None or element.text is None:
        return None
    text = element.text.strip()
    return text or None


def parse_manifest(source: Union[bytes, str, BinaryIO]) -> Manifest:
    """Parse a nuspec document.

    Args:
        source: Document content as bytes or str, or a binary file object.

    Returns:
        The parsed Manifest. Absent optional fields are None.

    Raises:
        MalformedDocument: If the document is not XML or has no metadata.
        MissingField: If id, version, authors or description is absent.
    """
    try:
        if isinstance(source, (bytes, str)):
            root = ET.fromstring(source)
        else:
            root = ET.parse(source).getroot()
    except ET.ParseError as e:
        raise MalformedDocument(f"Manifest is not valid XML: {e}") from e

    if _local_name(root.tag) != "package":
        raise MalformedDocument(f"Unexpected manifest root element <{_local_name(root.tag)}>")

    metadata = _children(root).get("metadata")
    if metadata is None:
        raise MalformedDocument("Manifest has no <metadata> element")

    fields = _children(metadata)
    values = {name: _text(fields.get(name)) for name in REQUIRED_FIELDS}
    for name in REQUIRED_FIELDS:
        if values[name] is None:
            raise MissingField(name)

    return Manifest(
        id=values["id"],
        version=values["version"],
        authors=values["authors"],
        description=values["description"],
        owners=_text(fields.get("owners")),
        copyright=_text(fields.get("copyright")),
        readme=_text(fields.get("readme")),
        license=_parse_license(fields.get("license")),
        license_url=_text(fields.get("licenseUrl")),
        project_url=_text(fields.get("projectUrl")),
        release_notes=_text(fields.get("releaseNotes")),
        tags=_text(fields.get("tags")),
        require_license_acceptance=_parse_bool(fields.get("requireLicenseAcceptance")),
        dependencies=_parse_dependencies(fields.get("dependencies")),
    )


def _parse_license(element: Optional[ET.Element]) -> Optional[LicenseDescriptor]:
    value = _text(element)
    if element is None or value is None:
        return None

    kind = element.get("type", "").strip().lower()
    try:
        license_kind = LicenseKind(kind)
    except ValueError as e:
        raise MalformedDocument(f"Unknown license type '{kind}'") from e
    return LicenseDescriptor(kind=license_kind, value=value)


def _parse_bool(element: Optional[ET.Element]) -> Optional[bool]:
    value = _text(element)
    if value is None:
        return None
    if value.lower() in ("true", "1"):
        return True
    if value.lower() in ("false", "0"):
        return False
    raise MalformedDocument(f"Invalid boolean value '{value}'")


def _parse_dependencies(element: Optional[ET.Element]) -> tuple[ManifestDependency, ...]:
    """Flatten ``<dependency>`` entries, grouped or not, in document order."""
    if element is None:
        return ()

    dependencies: list[ManifestDependency] = []
    for child in element:
        name = _local_name(child.tag)
        if name == "dependency":
            dependencies.append(_parse_dependency(child, None))
        elif name == "group":
            framework = child.get("targetFramework")
            for grouped in child:
                if _local_name(grouped.tag) == "dependency":
                    dependencies.append(_parse_dependency(grouped, framework))
    return tuple(dependencies)


def _parse_dependency(element: ET.Element, framework: Optional[str]) -> ManifestDependency:
    dependency_id = element.get("id")
    if not dependency_id:
        raise MissingField("dependency/@id")
    return ManifestDependency(
        id=dependency_id,
        version=element.get("version", ""),
        exclude=element.get("exclude"),
        target_framework=framework,
    )


def find_manifest(
    artifact_dir: Path,
    package_id: str,
    version: str,
    logger: Optional[logging.Logger] = None,
) -> Optional[Manifest]:
    """Locate and parse the manifest of an acquired artifact.

    Looks for ``<id>.nuspec`` in the artifact root (extracted archives),
    then for the same member inside ``<id>.<version>.nupkg`` (CLI installs).

    Args:
        artifact_dir: Extracted artifact directory.
        package_id: Package identifier.
        version: Package version.
        logger: Logger to report to. Defaults to the module logger.

    Returns:
        The parsed Manifest, or None if the artifact contains no manifest.

    Raises:
        ParseError: If a manifest is found but cannot be parsed.
    """
    log = logger or logging.getLogger(__name__)
    nuspec_name = f"{package_id}.nuspec".lower()

    if artifact_dir.is_dir():
        for path in sorted(artifact_dir.iterdir()):
            if path.is_file() and path.name.lower() == nuspec_name:
                log.debug("Found manifest %s", path)
                with open(path, "rb") as f:
                    return parse_manifest(f)

    nupkg_path = artifact_dir / f"{package_id}.{version}.nupkg"
    if nupkg_path.is_file():
        try:
            with zipfile.ZipFile(nupkg_path) as archive:
                for member in archive.namelist():
                    if member.lower() == nuspec_name:
                        log.debug("Found manifest %s in %s", member, nupkg_path)
                        with archive.open(member) as f:
                            return parse_manifest(f)
        except zipfile.BadZipFile as e:
            raise MalformedDocument(f"{nupkg_path} is not a valid package archive") from e

    log.warning("Manifest '%s.nuspec' not found inside %s", package_id, artifact_dir)
    return None
