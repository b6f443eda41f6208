"""A run of text inside a document"""

from dataclasses import dataclass
from typing import Any, ClassVar

from typing_extensions import override

from textimg.config import settings
from textimg.errors import FormatError
from textimg.models.content_item import ContentItem, ContentItemType


@dataclass
class TextRun(ContentItem):
    """Represents a run of text in the document"""

    ITEM_TYPE: ClassVar[ContentItemType] = ContentItemType.TEXT

    value: str = ""

    @override
    def to_dict(self) -> dict[str, Any]:
        """Serialize this text run to a dictionary for JSON storage"""
        return {
            settings.SERIALIZATION_KEYS.ITEM_TYPE.value: self.ITEM_TYPE.value,
            settings.SERIALIZATION_KEYS.TEXT_VALUE.value: self.value,
        }

    @classmethod
    @override
    def from_dict(cls, data: dict[str, Any]) -> "TextRun":
        """Deserialize this text run from a dictionary loaded from JSON"""
        value = data.get(settings.SERIALIZATION_KEYS.TEXT_VALUE.value, "")
        if not isinstance(value, str):
            raise FormatError(f"Text item has a non-string value: {value!r}")
        return cls(value=value)
