"""Base interface for notice reporters.

Reporters render a ThirdPartyNotice tree to a formatted document
(Markdown, etc.) and write it to disk.
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from notice_tracker.exceptions import NoticeRenderError
from notice_tracker.models import ThirdPartyNotice


class BaseReporter(ABC):
    """Abstract base class for notice reporters.

    Reporters take the notice tree and generate a formatted document.
    Rendering happens entirely in memory; writing replaces the target file
    in one step, so a failed run never leaves a truncated document.
    """

    @abstractmethod
    def render(self, notice: ThirdPartyNotice, output_path: Path) -> str:
        """Render a notice to formatted output.

        Args:
            notice: Notice tree to render.
            output_path: Absolute path of the document, used to express
                distributed file paths relative to it.

        Returns:
            Rendered output as a string.

        Raises:
            NoticeRenderError: If the notice cannot be rendered.
        """
        ...

    def write(self, notice: ThirdPartyNotice, output_path: Union[str, Path]) -> Path:
        """Render and write a notice to a file.

        Parent directories are created as needed. The content goes to a
        temporary file in the target directory which then replaces the
        target atomically.

        Args:
            notice: Notice tree to render.
            output_path: Path to write the output file.

        Returns:
            Absolute path of the written document.

        Raises:
            NoticeRenderError: If the document cannot be rendered or written.
        """
        output_path = Path(output_path).absolute()
        content = self.render(notice, output_path)

        tmp_name: Optional[str] = None
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="",
                dir=output_path.parent,
                prefix=f".{output_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
            os.replace(tmp_name, output_path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise NoticeRenderError(f"Cannot write {output_path}: {e}") from e

        return output_path
