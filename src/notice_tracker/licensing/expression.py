"""SPDX license expression parsing.

Wraps the license-expression library: validates expressions against the
SPDX license list and flattens them to the license identifiers they
reference.
"""

import logging
from typing import Optional

from license_expression import (
    ExpressionError,
    LicenseWithExceptionSymbol,
    Licensing,
    get_spdx_licensing,
)

from notice_tracker.exceptions import InvalidExpression

logger = logging.getLogger(__name__)

# Initialize SPDX licensing library once, loading the license index is slow
SPDX = get_spdx_licensing()

LICENSE_REF_PREFIX = "LicenseRef-"


def parse_expression(
    expression: str, licensing: Optional[Licensing] = None
):
    """Parse and validate an SPDX license expression.

    ``LicenseRef-`` identifiers are accepted as user defined licenses; any
    other identifier must be on the SPDX license list.

    Args:
        expression: Expression such as "MIT OR Apache-2.0".
        licensing: Licensing to parse with. Defaults to the SPDX licensing.

    Returns:
        The parsed expression.

    Raises:
        InvalidExpression: If the expression is empty, malformed or uses
            unknown identifiers.
    """
    licensing = licensing or SPDX
    try:
        parsed = licensing.parse(expression)
    except ExpressionError as e:
        raise InvalidExpression(f"Invalid license expression '{expression}': {e}") from e

    if parsed is None:
        raise InvalidExpression("Empty license expression")

    unknown = [
        key
        for key in licensing.unknown_license_keys(parsed)
        if not key.startswith(LICENSE_REF_PREFIX)
    ]
    if unknown:
        raise InvalidExpression(
            f"Unknown license identifier(s) in '{expression}': {', '.join(unknown)}"
        )
    return parsed


def license_ids(expression: str, licensing: Optional[Licensing] = None) -> list[str]:
    """Flatten an expression to the license identifiers it references.

    Identifiers keep the left-to-right order of the expression and are not
    de-duplicated. A ``WITH`` exception contributes its license only.
    ``LicenseRef-`` identifiers have no canonical text and are skipped.

    Args:
        expression: SPDX license expression.
        licensing: Licensing to parse with. Defaults to the SPDX licensing.

    Returns:
        List of SPDX license identifiers.

    Raises:
        InvalidExpression: If the expression does not validate.
    """
    licensing = licensing or SPDX
    parsed = parse_expression(expression, licensing)

    ids: list[str] = []
    for symbol in licensing.license_symbols(parsed, unique=False, decompose=False):
        if isinstance(symbol, LicenseWithExceptionSymbol):
            symbol = symbol.license_symbol
        if symbol.key.startswith(LICENSE_REF_PREFIX):
            logger.debug("Skipping user defined license %s", symbol.key)
            continue
        ids.append(symbol.key)
    return ids
