"""License text generation from SPDX license expressions.

Expands an expression into the canonical text of every license it
references, filling in the copyright holders and year.
"""

import logging
import re
from functools import lru_cache
from importlib.resources import files
from typing import Callable, Optional

from license_expression import Licensing

from notice_tracker.exceptions import LicenseTemplateNotFound
from notice_tracker.licensing.expression import SPDX, license_ids
from notice_tracker.models import GeneratedLicense

HOLDERS_PLACEHOLDER = "<copyright holders>"
YEAR_PLACEHOLDER = "<year>"

# The year and the whitespace run after it
_YEAR_WITH_TRAILING_WHITESPACE = re.compile(re.escape(YEAR_PLACEHOLDER) + r"\s*")

TemplateLoader = Callable[[str], Optional[str]]


@lru_cache(maxsize=64)
def load_bundled_template(license_id: str) -> Optional[str]:
    """Load the canonical text of a license from the bundled templates.

    Args:
        license_id: SPDX license identifier.

    Returns:
        The template text, or None if no template is bundled.
    """
    resource = files("notice_tracker.licensing.texts").joinpath(f"{license_id}.txt")
    if not resource.is_file():
        return None
    return resource.read_text(encoding="utf-8")


def available_licenses() -> list[str]:
    """Return the identifiers of the bundled license templates, sorted."""
    return sorted(
        resource.name[: -len(".txt")]
        for resource in files("notice_tracker.licensing.texts").iterdir()
        if resource.name.endswith(".txt")
    )


def fill_template(template: str, year: Optional[int], holders: str) -> str:
    """Substitute the holders and year placeholders of a license template.

    Holders replace ``<copyright holders>`` literally. With a year,
    ``<year>`` is replaced by it; without one, ``<year>`` is removed along
    with the whitespace following it so "Copyright (c) <year> Acme" becomes
    "Copyright (c) Acme".
    """
    text = template.replace(HOLDERS_PLACEHOLDER, holders)
    if year is not None:
        return text.replace(YEAR_PLACEHOLDER, str(year))
    return _YEAR_WITH_TRAILING_WHITESPACE.sub("", text)


class LicenseTextGenerator:
    """Generates license bodies from SPDX license expressions.

    Output is a pure function of (expression, year, holders): templates
    are read from the bundled package data only.

    Attributes:
        template_loader: Callable returning the template of an identifier,
            or None when unknown.
    """

    def __init__(
        self,
        template_loader: Optional[TemplateLoader] = None,
        licensing: Optional[Licensing] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.template_loader = template_loader or load_bundled_template
        self.licensing = licensing or SPDX
        self.logger = logger or logging.getLogger(__name__)

    def generate(self, expression: str, year: Optional[int], holders: str) -> list[str]:
        """Generate one license text per identifier of an expression.

        Args:
            expression: SPDX license expression (e.g., "MIT OR Apache-2.0").
            year: Copyright year, or None to drop the year placeholder.
            holders: Copyright holders.

        Returns:
            License texts in the expression's left-to-right order, one per
            referenced identifier (duplicates included).

        Raises:
            InvalidExpression: If the expression does not validate.
            LicenseTemplateNotFound: If an identifier has no template.
        """
        texts = []
        for license_id in license_ids(expression, self.licensing):
            template = self.template_loader(license_id)
            if template is None:
                raise LicenseTemplateNotFound(f"No license text available for {license_id}")
            self.logger.debug("Generating %s text for %s", license_id, holders)
            texts.append(fill_template(template, year, holders))
        return texts

    def generate_for(self, license: GeneratedLicense) -> list[str]:
        """Generate the texts of a resolved GeneratedLicense."""
        return self.generate(license.expression, license.year, license.holders)
