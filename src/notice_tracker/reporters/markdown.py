"""Markdown reporter for third party notice documents.

This module provides a reporter that renders the notice tree into a
Markdown document using Jinja2 templates.
"""

import os
from importlib.resources import files
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, Template

from notice_tracker.exceptions import NoticeRenderError
from notice_tracker.models import (
    GeneratedLicense,
    LicenseContent,
    LicenseUrl,
    LiteralLicense,
    ThirdPartyNotice,
)
from notice_tracker.reporters.base import BaseReporter

NOT_SPECIFIED = "Not specified"
SEE_LICENSE_FILE = "See the LICENSE file for details."


def license_text(license: Optional[LicenseContent]) -> str:
    """Describe license content in one line.

    Generated licenses show their expression, literal ones point to the
    LICENSE file, URLs become a link.
    """
    if license is None:
        return NOT_SPECIFIED
    if isinstance(license, GeneratedLicense):
        return license.expression
    if isinstance(license, LiteralLicense):
        return SEE_LICENSE_FILE
    if isinstance(license, LicenseUrl):
        return f"See the [license]({license.url}) for details."
    raise TypeError(f"Unsupported license content: {license!r}")


def relative_path(path: Union[str, Path], base_dir: Union[str, Path]) -> str:
    """Return ``path`` relative to ``base_dir`` with forward slashes."""
    try:
        relative = os.path.relpath(path, base_dir)
    except ValueError:
        # Different drives on Windows
        relative = str(path)
    return relative.replace("\\", "/")


def blockquote(text: str) -> str:
    """Quote every line of ``text``."""
    return "\n".join(f"> {line}" if line else ">" for line in text.splitlines())


class MarkdownNoticeReporter(BaseReporter):
    """Reporter that generates Markdown third party notices.

    Headings nest one level per tree level: the document title is level 1,
    packages level 2, items level 3 and their file lists level 4. A notice
    holding exactly one package omits the package heading and starts items
    at level 2.

    Output contains no timestamps, so rendering the same tree always yields
    the same document.

    Attributes:
        template: The Jinja2 template to use for rendering.
    """

    def __init__(self, template_path: Optional[Path] = None) -> None:
        """Initialize the Markdown reporter.

        Args:
            template_path: Optional path to a custom Jinja2 template.
                If not provided, uses the default bundled template.
        """
        if template_path:
            # Load custom template from file
            env = self._create_environment(FileSystemLoader(template_path.parent))
            self.template = env.get_template(template_path.name)
        else:
            self.template = self._load_default_template()

    @staticmethod
    def _create_environment(loader: Optional[FileSystemLoader] = None) -> Environment:
        env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["license_text"] = license_text
        env.filters["relative_path"] = relative_path
        env.filters["blockquote"] = blockquote
        return env

    def _load_default_template(self) -> Template:
        """Load the default bundled Jinja2 template.

        Returns:
            The default template loaded from package resources.
        """
        template_content = (
            files("notice_tracker.reporters.templates")
            .joinpath("third_party_notices.md.j2")
            .read_text(encoding="utf-8")
        )
        return self._create_environment().from_string(template_content)

    def render(self, notice: ThirdPartyNotice, output_path: Path) -> str:
        """Render a notice to Markdown.

        Args:
            notice: Notice tree to render.
            output_path: Path of the document; file lists are relative to
                its parent directory.

        Returns:
            Rendered Markdown document as a string.

        Raises:
            NoticeRenderError: If a distributed file does not exist.
        """
        output_path = Path(output_path).absolute()
        self._check_files(notice)

        show_packages = len(notice) != 1
        package_level = 2 if show_packages else 1
        return self.template.render(
            notice=notice,
            show_packages=show_packages,
            package_level=package_level,
            item_level=package_level + 1,
            base_dir=output_path.parent,
        )

    @staticmethod
    def _check_files(notice: ThirdPartyNotice) -> None:
        for package in notice:
            for item in package:
                for file in item:
                    if not file.path.exists():
                        raise NoticeRenderError(
                            f"Distributed file {file.path} of {item.name} does not exist"
                        )
