"""Output reporters for generating notice documents.

This module provides reporters for rendering the third party notice tree
to document formats.
"""

from notice_tracker.reporters.base import BaseReporter
from notice_tracker.reporters.markdown import MarkdownNoticeReporter

__all__ = ["BaseReporter", "MarkdownNoticeReporter"]
