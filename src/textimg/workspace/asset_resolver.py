"""
Asset Resolver - Translates between archive asset names and workspace files.

Composes the archive codec and the workspace manager: opening extracts
assets into the tab's workspace and points image references at them,
pasting writes new images into the workspace, and saving reads them back
to build a new archive.
"""

import logging
import uuid
from pathlib import Path

from textimg.config import settings
from textimg.models.content_item import ContentItem
from textimg.models.dao.archive_dao import ArchiveDAO, AssetSource, EncodedArchive
from textimg.models.document import Document
from textimg.models.elements import ImageRef
from textimg.utils.mime import (
    detect_image_mime_type,
    extension_for_mime,
    mime_for_extension,
)
from textimg.workspace.workspace_manager import WorkspaceManager


class AssetResolver:
    """Resolves image references of documents against per-tab workspaces"""

    def __init__(self, workspaces: WorkspaceManager):
        self.workspaces: WorkspaceManager = workspaces
        self.logger: logging.Logger = logging.getLogger("AssetResolver")

    def new_document(self, tab_id: str) -> Document:
        """Create an empty draft for a new tab"""
        decoded = ArchiveDAO.create_empty()
        return Document(tab_id, items=decoded.items)

    def open_document(self, tab_id: str, filepath: Path) -> Document:
        """
        Load an archive into a new document for the tab.

        Raises:
            FormatError: the archive is not readable; no document is produced
        """
        filepath = Path(filepath)
        decoded = ArchiveDAO.decode(filepath)

        workspace = self.workspaces.get_or_create(tab_id)
        image_map = ArchiveDAO.extract_assets(filepath, workspace)
        self.resolve(decoded.items, image_map)

        document = Document(tab_id, items=decoded.items, file_path=filepath)
        _ = document.capture_snapshot()
        self.logger.info(
            "Opened %s in %s (%d items, %d assets)",
            filepath,
            tab_id,
            len(document.items),
            len(image_map),
        )
        return document

    def resolve(self, items: list[ContentItem], image_map: dict[str, Path]) -> None:
        """Point every image reference at its materialized file"""
        for item in items:
            if not isinstance(item, ImageRef):
                continue
            path = image_map.get(item.filename)
            if path is None:
                self.logger.warning("No asset found for image %s", item.filename)
                continue
            item.render_path = str(path)

    def paste_image(
        self, document: Document, data: bytes, filename_hint: str | None = None
    ) -> ImageRef:
        """
        Store pasted image bytes in the document's workspace.

        Returns a new image reference; inserting it into the content is up
        to the caller. The archive is only touched on the next save.
        """
        filename = self.generate_filename(data, filename_hint)
        path = self.workspaces.write_asset_bytes(document.tab_id, filename, data)
        self.logger.debug("Pasted image %s into %s", filename, document.tab_id)
        return ImageRef(filename=filename, render_path=str(path))

    @staticmethod
    def generate_filename(data: bytes, filename_hint: str | None = None) -> str:
        """A fresh unique filename, keeping the extension of the hint if any"""
        extension = ""
        if filename_hint:
            extension = Path(filename_hint).suffix.lower()
            if mime_for_extension(extension) == "application/octet-stream":
                extension = ""
        if not extension:
            extension = extension_for_mime(detect_image_mime_type(data))
        if not extension or extension == ".bin":
            extension = settings.DEFAULT_IMAGE_EXTENSION
        return f"{uuid.uuid4().hex}{extension}"

    def collect_asset_sources(self, document: Document) -> dict[str, AssetSource]:
        """Bytes of every image, read through the workspace when it holds them"""
        filenames = [image.filename for image in document.images]
        sources: dict[str, AssetSource] = dict(
            self.workspaces.read_asset_bytes(document.tab_id, filenames)
        )

        for image in document.images:
            if image.filename in sources or image.render_path is None:
                continue
            sources[image.filename] = Path(image.render_path)
        return sources

    def save_document(
        self, document: Document, filepath: Path | None = None
    ) -> EncodedArchive:
        """
        Encode the document into an archive at filepath (or its current path).

        Images whose bytes cannot be read are skipped by the codec; the
        save itself still succeeds.
        """
        target = Path(filepath) if filepath is not None else document.file_path
        if target is None:
            raise ValueError(f"Document {document.tab_id} has no file path to save to")

        sources = self.collect_asset_sources(document)
        encoded = ArchiveDAO.write(document.items, sources, target)

        document.file_path = target
        _ = document.capture_snapshot()
        if encoded.skipped:
            self.logger.warning(
                "Saved %s without %d missing assets: %s",
                target,
                len(encoded.skipped),
                ", ".join(encoded.skipped),
            )
        else:
            self.logger.info("Saved %s", target)
        return encoded

    def close_document(self, tab_id: str) -> bool:
        """Tear down the tab's workspace"""
        return self.workspaces.close(tab_id)

    @staticmethod
    def image_map(document: Document) -> dict[str, str]:
        """Filename to render path mapping used for rendering"""
        return document.image_map()
