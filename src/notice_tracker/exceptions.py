"""Exception hierarchy for notice_tracker.

Acquisition, parsing and license errors are recoverable at the level of a
single workspace unit; rendering errors abort the whole generation run.
"""

from typing import Optional

__all__ = [
    "NoticeTrackerError",
    "AcquisitionError",
    "PrimaryToolFailed",
    "DownloadFailed",
    "ExtractionFailed",
    "AcquisitionIOError",
    "ParseError",
    "MissingField",
    "MalformedDocument",
    "LicenseError",
    "InvalidExpression",
    "FileUnreadable",
    "LicenseTemplateNotFound",
    "BindingGenerationError",
    "NoticeRenderError",
]


class NoticeTrackerError(Exception):
    """Base class for all notice_tracker errors."""


class AcquisitionError(NoticeTrackerError):
    """Raised when an artifact cannot be acquired."""


class PrimaryToolFailed(AcquisitionError):
    """Raised when the package manager CLI does not succeed.

    Attributes:
        exit_code: Tool exit code, or None if the tool could not be started.
    """

    def __init__(self, message: str, exit_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class DownloadFailed(AcquisitionError):
    """Raised when the artifact download fails.

    Attributes:
        status: HTTP status code, or None for transport errors.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ExtractionFailed(AcquisitionError):
    """Raised when a downloaded artifact is not a valid archive."""


class AcquisitionIOError(AcquisitionError):
    """Raised on filesystem errors while storing an artifact."""


class ParseError(NoticeTrackerError):
    """Raised when a manifest cannot be parsed."""


class MissingField(ParseError):
    """Raised when a required manifest field is absent.

    Attributes:
        field: Name of the missing element.
    """

    def __init__(self, field: str) -> None:
        super().__init__(f"Manifest is missing required field '{field}'")
        self.field = field


class MalformedDocument(ParseError):
    """Raised when the manifest is not a valid document."""


class LicenseError(NoticeTrackerError):
    """Raised when license content cannot be resolved or generated."""


class InvalidExpression(LicenseError):
    """Raised when a license expression does not parse."""


class FileUnreadable(LicenseError):
    """Raised when a license file cannot be read."""


class LicenseTemplateNotFound(LicenseError):
    """Raised when no canonical text is available for a license identifier."""


class BindingGenerationError(NoticeTrackerError):
    """Raised when the external binding generator fails for a header."""


class NoticeRenderError(NoticeTrackerError):
    """Raised when the notice document cannot be rendered or written."""
