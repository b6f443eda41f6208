"""Abstract base class for all content items of a document"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar


class ContentItemType(Enum):
    """Discriminant of the content item variants, as written in the manifest"""

    TEXT = "text"
    IMAGE = "img"


class ContentItem(ABC):
    """Abstract base class for all items that make up a document's content"""

    ITEM_TYPE: ClassVar[ContentItemType]

    @property
    def item_type(self) -> ContentItemType:
        """The discriminant of this variant"""
        return self.ITEM_TYPE

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize the persisted part of this item for the manifest"""

    @classmethod
    @abstractmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContentItem":
        """Deserialize this item from a manifest entry"""
