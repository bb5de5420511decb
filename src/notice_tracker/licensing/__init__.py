"""License resolution and license text generation.

This module resolves manifest license declarations and expands SPDX
license expressions into canonical license texts.
"""

from notice_tracker.licensing.expression import license_ids, parse_expression
from notice_tracker.licensing.generator import (
    LicenseTextGenerator,
    available_licenses,
    fill_template,
)
from notice_tracker.licensing.resolver import LicenseResolver

__all__ = [
    "LicenseResolver",
    "LicenseTextGenerator",
    "available_licenses",
    "fill_template",
    "license_ids",
    "parse_expression",
]
