"""Factory dispatching manifest entries to their content item variant"""

from typing import Any

from textimg.config import settings
from textimg.errors import FormatError
from textimg.models.content_item import ContentItem, ContentItemType

from .image_ref import ImageRef
from .text_run import TextRun


class ContentItemFactory:
    """Builds content items from manifest entries using the discriminant field"""

    @staticmethod
    def from_dict(data: Any) -> ContentItem:
        """Build the variant named by the entry's type tag"""
        if not isinstance(data, dict):
            raise FormatError(f"Content item is not an object: {data!r}")

        raw_type = data.get(settings.SERIALIZATION_KEYS.ITEM_TYPE.value)
        try:
            item_type = ContentItemType(raw_type)
        except ValueError as e:
            raise FormatError(f"Unknown content item type: {raw_type!r}") from e

        match item_type:
            case ContentItemType.TEXT:
                return TextRun.from_dict(data)
            case ContentItemType.IMAGE:
                return ImageRef.from_dict(data)

    @staticmethod
    def from_list(entries: Any) -> list[ContentItem]:
        """Build the ordered item sequence of a manifest"""
        if not isinstance(entries, list):
            raise FormatError("Manifest content is not a list")
        return [ContentItemFactory.from_dict(entry) for entry in entries]

    @staticmethod
    def get_supported_item_types() -> list[type[ContentItem]]:
        """Get the list of supported content item variants"""
        return [TextRun, ImageRef]
