"""The models used to represent a document and its content"""

__all__ = [
    "ContentItem",
    "ContentItemType",
    "TextRun",
    "ImageRef",
    "Document",
    "Snapshot",
    "ArchiveManifest",
]

from .content_item import ContentItem, ContentItemType
from .elements import TextRun
from .elements import ImageRef

from .snapshot import Snapshot
from .document import Document
from .manifest import ArchiveManifest
