"""Notice generation pipeline.

Processes workspace units one after the other: every declared dependency
is acquired, its manifest read and its license resolved, the distributed
files are staged, and one notice item per dependency is collected under
the unit's package.
"""

import json
import logging
import platform
from collections import Counter
from pathlib import Path
from typing import Optional, Union

from notice_tracker import __version__
from notice_tracker.acquisition import ArtifactAcquirer
from notice_tracker.bindings import BindingGenerator
from notice_tracker.config import NoticeTrackerSettings
from notice_tracker.exceptions import BindingGenerationError, LicenseError, NoticeTrackerError
from notice_tracker.licensing import LicenseResolver, LicenseTextGenerator, license_ids
from notice_tracker.manifest import find_manifest
from notice_tracker.models import (
    BindingSpec,
    DependencySpec,
    DistributedFile,
    FileStatus,
    GeneratedLicense,
    LicenseContent,
    LiteralLicense,
    Manifest,
    StagedFileSpec,
    ThirdPartyNotice,
    ThirdPartyNoticeItem,
    ThirdPartyNoticePackage,
    Workspace,
    WorkspaceUnit,
)
from notice_tracker.reporters import BaseReporter, MarkdownNoticeReporter
from notice_tracker.staging import copy_unmodified, copy_with_replacements, write_generated

DEFAULT_NOTICE_FILENAME = "THIRD-PARTY-NOTICES.md"
METADATA_FILENAME = "metadata.json"

# Errors that skip the current unit instead of aborting the run
UNIT_ERRORS = (NoticeTrackerError, OSError, UnicodeDecodeError)


class NoticePipeline:
    """Builds the third party notice of a workspace.

    Units are processed strictly in order, and the dependencies of a unit
    as well, so the notice tree always follows declaration order. A unit
    whose processing fails is logged and contributes an empty package;
    the run carries on with the next unit.

    Attributes:
        acquirer: Artifact acquirer.
        settings: Runtime settings.
        license_resolver: Resolver of manifest license declarations.
        text_generator: Generator of license texts.
        binding_generator: Optional external binding generator.
    """

    def __init__(
        self,
        acquirer: ArtifactAcquirer,
        settings: Optional[NoticeTrackerSettings] = None,
        license_resolver: Optional[LicenseResolver] = None,
        text_generator: Optional[LicenseTextGenerator] = None,
        binding_generator: Optional[BindingGenerator] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.acquirer = acquirer
        self.settings = settings or NoticeTrackerSettings()
        self.license_resolver = license_resolver or LicenseResolver(logger=self.logger)
        self.text_generator = text_generator or LicenseTextGenerator(logger=self.logger)
        self.binding_generator = binding_generator

    async def run(self, workspace: Workspace) -> ThirdPartyNotice:
        """Process every unit of a workspace.

        Args:
            workspace: Scanned workspace.

        Returns:
            Notice holding one package per unit, in unit order.
        """
        packages_dir = self.settings.resolve_packages_dir(workspace.root)
        notice = ThirdPartyNotice()
        for unit in workspace.units:
            notice.append(await self.process_unit(unit, packages_dir))
        return notice

    async def process_unit(
        self, unit: WorkspaceUnit, packages_dir: Path
    ) -> ThirdPartyNoticePackage:
        """Process the dependencies of one unit.

        Args:
            unit: Workspace unit.
            packages_dir: Directory receiving the acquired artifacts.

        Returns:
            The unit's package. It is empty when the unit was skipped.
        """
        package = ThirdPartyNoticePackage(unit.name)
        if not unit.dependencies:
            self.logger.warning("Unit %s declares no dependencies, skipping", unit.name)
            return package

        self.logger.debug("Processing unit %s", unit.name)
        items = []
        try:
            for dependency in unit.dependencies:
                if not dependency.version:
                    self.logger.warning(
                        "No version declared for %s in unit %s, skipping",
                        dependency.name,
                        unit.name,
                    )
                    continue
                items.append(await self.process_dependency(unit, dependency, packages_dir))
        except UNIT_ERRORS as e:
            self.logger.warning("Skipping unit %s: %s", unit.name, e)
            return package

        package.extend(items)
        return package

    async def process_dependency(
        self, unit: WorkspaceUnit, dependency: DependencySpec, packages_dir: Path
    ) -> ThirdPartyNoticeItem:
        """Acquire, resolve and stage one dependency.

        Args:
            unit: Unit declaring the dependency.
            dependency: Dependency declaration.
            packages_dir: Directory receiving the acquired artifacts.

        Returns:
            The dependency's notice item with every staged file attached.

        Raises:
            AcquisitionError: If the artifact cannot be acquired.
            ParseError: If the artifact's manifest is invalid.
            OSError: If a file cannot be staged.
            BindingGenerationError: If the binding generator fails.
        """
        artifact_dir = await self.acquirer.acquire(
            dependency.name,
            dependency.version,
            packages_dir,
            self.settings.acquisition_mode,
        )
        self.logger.debug("%s %s acquired at %s", dependency.name, dependency.version, artifact_dir)

        manifest = find_manifest(
            artifact_dir, dependency.name, dependency.version, logger=self.logger
        )
        license = self._resolve_license(manifest, artifact_dir) if manifest else None

        item = ThirdPartyNoticeItem(
            name=manifest.id if manifest else dependency.name,
            version=manifest.version if manifest else dependency.version,
            link=dependency.link
            or self.settings.package_link_template.format(
                name=dependency.name, version=dependency.version
            ),
            copyright=manifest.copyright if manifest else None,
            license=license,
        )

        staging_dir = unit.root / self.settings.staging_dirname / dependency.name
        for file_spec in dependency.files:
            item.add_file(self._stage_file(artifact_dir, staging_dir, file_spec))

        try:
            item.extend(self._stage_license(item.license, staging_dir))
        except LicenseError as e:
            self.logger.warning("No license file written for %s: %s", item.name, e)

        if dependency.bindings is not None:
            bindings_file = self._generate_bindings(artifact_dir, staging_dir, dependency.bindings)
            if bindings_file is not None:
                item.add_file(bindings_file)

        item.add_file(self._write_metadata(staging_dir, dependency, manifest, item))
        return item

    def _resolve_license(
        self, manifest: Manifest, artifact_dir: Path
    ) -> Optional[LicenseContent]:
        try:
            return self.license_resolver.resolve(manifest, artifact_dir)
        except LicenseError as e:
            self.logger.warning("Cannot resolve license of %s: %s", manifest.id, e)
            return None

    def _stage_file(
        self, artifact_dir: Path, staging_dir: Path, file_spec: StagedFileSpec
    ) -> DistributedFile:
        source = artifact_dir / file_spec.source
        destination = staging_dir / file_spec.destination_path
        if file_spec.replacements:
            return copy_with_replacements(source, destination, file_spec.replacements)
        return copy_unmodified(source, destination)

    def _stage_license(
        self, license: Optional[LicenseContent], staging_dir: Path
    ) -> list[DistributedFile]:
        """Write the license files of an item.

        All texts are generated before anything is written, so a failure
        leaves no partial license files behind.
        """
        if isinstance(license, GeneratedLicense):
            texts = self.text_generator.generate_for(license)
            names = _license_file_names(
                license_ids(license.expression, self.text_generator.licensing)
            )
            return [
                write_generated(staging_dir / name, text)
                for name, text in zip(names, texts)
            ]

        if isinstance(license, LiteralLicense) and license.path is not None:
            return [copy_unmodified(license.path, staging_dir / "LICENSE")]

        return []

    def _generate_bindings(
        self, artifact_dir: Path, staging_dir: Path, spec: BindingSpec
    ) -> Optional[DistributedFile]:
        if self.binding_generator is None:
            self.logger.info("No binding generator configured, skipping %s", spec.header)
            return None

        header_path = artifact_dir / spec.header
        if not header_path.is_file():
            raise FileNotFoundError(f"Header file does not exist: {header_path}")

        output_path = staging_dir / spec.output
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            bindings = self.binding_generator.generate(header_path, self.settings.target)
            bindings.write_to_file(output_path)
        except Exception as e:
            raise BindingGenerationError(f"Cannot generate bindings for {header_path}: {e}") from e
        return DistributedFile(output_path, FileStatus.PACKAGE_METADATA_GENERATED)

    def _write_metadata(
        self,
        staging_dir: Path,
        dependency: DependencySpec,
        manifest: Optional[Manifest],
        item: ThirdPartyNoticeItem,
    ) -> DistributedFile:
        metadata = {
            "id": item.name,
            "version": item.version,
            "license": _license_summary(item.license),
            "files": [
                {
                    "path": file.path.relative_to(staging_dir).as_posix(),
                    "status": str(file.status),
                }
                for file in item
                if file.path.is_relative_to(staging_dir)
            ],
            "bindings": (
                {
                    "header_file_path": dependency.bindings.header,
                    "output_file_path": dependency.bindings.output,
                    "target": self.settings.target,
                }
                if dependency.bindings is not None
                else None
            ),
            "manifest_found": manifest is not None,
            "generator": {"name": "notice-tracker", "version": __version__},
            "build_host": {
                "os": platform.system().lower(),
                "arch": platform.machine(),
            },
        }
        return write_generated(
            staging_dir / METADATA_FILENAME, json.dumps(metadata, indent=2) + "\n"
        )


def _license_file_names(ids: list[str]) -> list[str]:
    """Name license files: LICENSE for a single text, LICENSE-<id> otherwise."""
    if len(ids) == 1:
        return ["LICENSE"]

    seen: Counter[str] = Counter()
    names = []
    for license_id in ids:
        seen[license_id] += 1
        suffix = f"-{seen[license_id]}" if seen[license_id] > 1 else ""
        names.append(f"LICENSE-{license_id}{suffix}")
    return names


def _license_summary(license: Optional[LicenseContent]) -> Optional[str]:
    if isinstance(license, GeneratedLicense):
        return license.expression
    if isinstance(license, LiteralLicense):
        return "file"
    if license is not None:
        return license.url
    return None


async def generate_notices(
    workspace: Workspace,
    settings: Optional[NoticeTrackerSettings] = None,
    output: Optional[Union[str, Path]] = None,
    acquirer: Optional[ArtifactAcquirer] = None,
    reporter: Optional[BaseReporter] = None,
    binding_generator: Optional[BindingGenerator] = None,
    logger: Optional[logging.Logger] = None,
) -> list[Path]:
    """Run the pipeline and write the notice documents.

    The workspace document holds every unit; units declaring their own
    notice path also get a document holding only their package.

    Args:
        workspace: Scanned workspace.
        settings: Runtime settings. Defaults to environment settings.
        output: Workspace document path. Defaults to the workspace's
            configured output, then THIRD-PARTY-NOTICES.md at its root.
        acquirer: Optional custom acquirer. When omitted one is built from
            the settings and closed afterwards.
        reporter: Optional custom reporter. Defaults to Markdown.
        binding_generator: Optional external binding generator.
        logger: Logger to report to. Defaults to the module logger.

    Returns:
        Paths of the written documents, workspace document first.

    Raises:
        NoticeRenderError: If a document cannot be written.
    """
    logger = logger or logging.getLogger(__name__)
    settings = settings or NoticeTrackerSettings()
    reporter = reporter or MarkdownNoticeReporter()

    owns_acquirer = acquirer is None
    if acquirer is None:
        acquirer = ArtifactAcquirer.from_settings(settings, logger=logger)
    try:
        pipeline = NoticePipeline(
            acquirer,
            settings,
            binding_generator=binding_generator,
            logger=logger,
        )
        notice = await pipeline.run(workspace)
    finally:
        if owns_acquirer:
            await acquirer.close()

    output_path = Path(output) if output else (
        workspace.output or workspace.root / DEFAULT_NOTICE_FILENAME
    )
    written = [reporter.write(notice, output_path)]
    logger.info("Generated %s", written[0])

    for unit, package in zip(workspace.units, notice):
        if unit.notice_path is not None:
            written.append(reporter.write(ThirdPartyNotice([package]), unit.notice_path))
            logger.info("Generated %s", written[-1])

    return written
