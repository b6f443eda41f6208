"""
Content snapshots and modification detection.

A snapshot is the msgpack encoding of the persisted identity of every
content item, in order. Render paths are never part of it, so resolving
an image into a workspace does not count as a modification.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, cast

import msgpack

from textimg.models.content_item import ContentItem, ContentItemType
from textimg.models.elements import ImageRef, TextRun


@dataclass(frozen=True)
class Snapshot:
    """Immutable serialized baseline of a document's content"""

    data: bytes

    def __len__(self) -> int:
        return len(self.data)


def _identity(item: ContentItem) -> list[Any]:
    match item.item_type:
        case ContentItemType.TEXT:
            text = cast(TextRun, item)
            return [item.item_type.value, text.value]
        case ContentItemType.IMAGE:
            image = cast(ImageRef, item)
            return [item.item_type.value, image.filename, image.width]


def take_snapshot(items: Iterable[ContentItem]) -> Snapshot:
    """Serialize the persisted identity of the items, order preserved"""
    packed = cast(
        bytes,
        msgpack.packb([_identity(item) for item in items], use_bin_type=True),
    )
    return Snapshot(packed)


def is_modified(items: Iterable[ContentItem], baseline: Snapshot) -> bool:
    """True iff the items differ from the baseline in value, variant or order"""
    return take_snapshot(items) != baseline
