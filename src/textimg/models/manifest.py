"""Archive manifest model for the .txti container"""

from dataclasses import dataclass, field
from typing import Any

from textimg.config import settings
from textimg.errors import FormatError
from textimg.models.content_item import ContentItem
from textimg.models.elements import ContentItemFactory


@dataclass
class ArchiveManifest:
    """Manifest holding the ordered content items of the archive"""

    version: int = settings.MANIFEST_VERSION
    items: list[ContentItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize manifest to dictionary"""
        return {
            settings.SERIALIZATION_KEYS.VERSION.value: self.version,
            settings.SERIALIZATION_KEYS.CONTENT.value: [
                item.to_dict() for item in self.items
            ],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ArchiveManifest":
        """Deserialize manifest from its JSON form

        Older files store the item list directly instead of an object.
        """
        if isinstance(data, list):
            return cls(version=0, items=ContentItemFactory.from_list(data))

        if not isinstance(data, dict):
            raise FormatError("Manifest is neither an object nor a list")

        content_key = settings.SERIALIZATION_KEYS.CONTENT.value
        if content_key not in data:
            raise FormatError("Manifest has no content")

        version = data.get(
            settings.SERIALIZATION_KEYS.VERSION.value, settings.MANIFEST_VERSION
        )
        if not isinstance(version, int) or version > settings.MANIFEST_VERSION:
            raise FormatError(f"Unsupported manifest version: {version!r}")

        return cls(
            version=version, items=ContentItemFactory.from_list(data[content_key])
        )
