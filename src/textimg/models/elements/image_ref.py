"""Represents a reference to an image embedded in the document"""

from dataclasses import dataclass, field
from typing import Any, ClassVar

from typing_extensions import override

from textimg.config import settings
from textimg.errors import FormatError
from textimg.models.content_item import ContentItem, ContentItemType


@dataclass
class ImageRef(ContentItem):
    """
    Reference to an embedded image.

    `filename` is the logical name of the asset inside the archive.
    `render_path` points to the materialized copy in the tab's workspace;
    it is never persisted and takes no part in equality.
    """

    ITEM_TYPE: ClassVar[ContentItemType] = ContentItemType.IMAGE

    filename: str
    render_path: str | None = field(default=None, compare=False)
    width: int | None = None

    @override
    def to_dict(self) -> dict[str, Any]:
        """Serialize this image to a dictionary for JSON storage"""
        result: dict[str, Any] = {
            settings.SERIALIZATION_KEYS.ITEM_TYPE.value: self.ITEM_TYPE.value,
            settings.SERIALIZATION_KEYS.IMAGE_SOURCE.value: self.filename,
        }
        if self.width is not None:
            result[settings.SERIALIZATION_KEYS.IMAGE_WIDTH.value] = self.width
        return result

    @classmethod
    @override
    def from_dict(cls, data: dict[str, Any]) -> "ImageRef":
        """Deserialize this image from a dictionary loaded from JSON"""
        filename = data.get(settings.SERIALIZATION_KEYS.IMAGE_SOURCE.value)
        if not isinstance(filename, str) or not filename:
            raise FormatError(f"Image item without a filename: {data!r}")

        width = data.get(settings.SERIALIZATION_KEYS.IMAGE_WIDTH.value)
        if width is not None:
            try:
                width = int(width)
            except (TypeError, ValueError) as e:
                raise FormatError(f"Image item has an invalid width: {width!r}") from e

        return cls(filename=filename, width=width)
