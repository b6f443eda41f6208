"""
Represents the Document model, the content of one editor tab
"""

import logging
from pathlib import Path
from typing_extensions import override

from textimg.config import settings
from textimg.models.content_item import ContentItem
from textimg.models.elements import ImageRef, TextRun
from textimg.models.snapshot import Snapshot, is_modified, take_snapshot


class Document:
    """
    The ordered content of a tab plus the baseline it was last loaded or saved with.

    The modified flag is derived by comparing the live items against the
    baseline; there is no way to set it directly.
    """

    def __init__(
        self,
        tab_id: str,
        items: list[ContentItem] | None = None,
        file_path: Path | None = None,
    ):
        self.tab_id: str = tab_id
        self.items: list[ContentItem] = items if items is not None else []
        self.file_path: Path | None = file_path
        self._baseline: Snapshot = take_snapshot(self.items)

    @property
    def modified(self) -> bool:
        """Whether the content differs from the last load or save"""
        return is_modified(self.items, self._baseline)

    @property
    def baseline(self) -> Snapshot:
        """The snapshot taken at the last load or save"""
        return self._baseline

    @property
    def is_draft(self) -> bool:
        """A draft has never been saved to or loaded from a file"""
        return self.file_path is None

    def capture_snapshot(self) -> Snapshot:
        """Replace the baseline with the current content"""
        self._baseline = take_snapshot(self.items)
        logging.getLogger("Document").debug(
            "Captured snapshot for %s (%d items)", self.tab_id, len(self.items)
        )
        return self._baseline

    @property
    def images(self) -> list[ImageRef]:
        """Image references in document order"""
        return [item for item in self.items if isinstance(item, ImageRef)]

    def image_map(self) -> dict[str, str]:
        """Filename to render path, for every resolved image"""
        return {
            image.filename: image.render_path
            for image in self.images
            if image.render_path is not None
        }

    def title(self) -> str:
        """The file name if saved, otherwise the first non-empty line of text"""
        if self.file_path is not None:
            return self.file_path.name

        for item in self.items:
            if isinstance(item, TextRun) and item.value.strip():
                first_line = item.value.strip().split("\n")[0].strip()
                return first_line[:255]
        return settings.UNTITLED_TITLE

    def tab_title(self) -> str:
        """Title truncated to fit a tab, keeping the archive extension"""
        title = self.title()
        max_length = settings.TAB_TITLE_LENGTH
        if len(title) <= max_length:
            return title

        extension = settings.ARCHIVE_EXTENSION
        if title.endswith(extension):
            keep = max(0, max_length - len(extension) - 1)
            return f"{title[: -len(extension)][:keep]}-{extension}"
        return title[:max_length]

    @override
    def __str__(self) -> str:
        return f"Document(Tab={self.tab_id}; Items={len(self.items)}; Path={self.file_path}; Modified={self.modified})"
