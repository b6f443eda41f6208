"""Archive-based persistence for documents with separate asset storage"""

import io
import json
import logging
import os
import posixpath
import tempfile
import zipfile
import zlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from textimg.config import settings
from textimg.errors import AssetIOError, FormatError
from textimg.models.content_item import ContentItem
from textimg.models.elements import ImageRef
from textimg.models.manifest import ArchiveManifest

AssetSource = bytes | Path

# Raised by ZipFile.read on a damaged or unsupported member
_MEMBER_READ_ERRORS = (zipfile.BadZipFile, zlib.error, NotImplementedError, EOFError)


@dataclass
class EncodedArchive:
    """Bytes of an encoded archive and the assets that had to be left out"""

    data: bytes
    skipped: list[str] = field(default_factory=list)


@dataclass
class DecodedArchive:
    """Content read from an archive. Asset bytes are not loaded."""

    items: list[ContentItem] = field(default_factory=list)
    asset_list: list[str] = field(default_factory=list)


class ArchiveDAO:
    """
    Handles reading/writing the .txti archive format.

    ZIP structure:
    - content.json (manifest: ordered content items, image filenames only)
    - assets/{filename} (raw binary data, one per referenced image)
    """

    @staticmethod
    def encode(
        items: Iterable[ContentItem],
        asset_sources: Mapping[str, AssetSource],
    ) -> EncodedArchive:
        """
        Build the archive in memory.

        Args:
            items: Content items in document order
            asset_sources: Mapping of image filename to its bytes or to a file to read

        Returns:
            The archive bytes and the filenames that could not be embedded
        """
        logger = logging.getLogger("ArchiveDAO")
        items = list(items)
        manifest = ArchiveManifest(items=items)
        skipped: list[str] = []

        zip_buffer = io.BytesIO()
        with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            manifest_json = json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False)
            zf.writestr(settings.MANIFEST_NAME, manifest_json.encode("utf-8"))

            for filename in ArchiveDAO._referenced_filenames(items):
                try:
                    asset_data = ArchiveDAO._read_source(
                        filename, asset_sources.get(filename)
                    )
                except AssetIOError as e:
                    logger.warning("Skipping asset: %s", e)
                    skipped.append(filename)
                    continue
                zf.writestr(settings.ASSETS_PREFIX + filename, asset_data)

        logger.debug(
            "Encoded archive: %d items, %d assets skipped", len(items), len(skipped)
        )
        return EncodedArchive(zip_buffer.getvalue(), skipped)

    @staticmethod
    def write(
        items: Iterable[ContentItem],
        asset_sources: Mapping[str, AssetSource],
        filepath: Path,
    ) -> EncodedArchive:
        """Encode the archive and write it atomically to filepath"""
        encoded = ArchiveDAO.encode(items, asset_sources)
        ArchiveDAO._atomic_write(encoded.data, Path(filepath))
        logging.getLogger("ArchiveDAO").debug(
            "Archive saved: %s (%d bytes)", filepath, len(encoded.data)
        )
        return encoded

    @staticmethod
    def decode(filepath: Path) -> DecodedArchive:
        """
        Read the manifest and the list of assets of an archive.

        Raises:
            FormatError: not a zip archive, or the manifest is missing or corrupt
        """
        logger = logging.getLogger("ArchiveDAO")
        logger.debug("Loading archive: %s", filepath)

        try:
            with zipfile.ZipFile(filepath, "r") as zf:
                try:
                    manifest_bytes = zf.read(settings.MANIFEST_NAME)
                except KeyError as e:
                    raise FormatError(
                        f"Invalid archive: missing {settings.MANIFEST_NAME}"
                    ) from e
                except _MEMBER_READ_ERRORS as e:
                    raise FormatError(
                        f"Corrupt {settings.MANIFEST_NAME}: {e}"
                    ) from e
                asset_list = [
                    ArchiveDAO._asset_filename(info)
                    for info in zf.infolist()
                    if ArchiveDAO._is_asset_entry(info)
                ]
        except zipfile.BadZipFile as e:
            raise FormatError(f"Not a valid archive: {filepath}") from e

        try:
            manifest_dict = json.loads(manifest_bytes.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise FormatError(f"Corrupt {settings.MANIFEST_NAME}: {e}") from e

        manifest = ArchiveManifest.from_dict(manifest_dict)
        logger.debug(
            "Archive loaded: %d items, %d assets", len(manifest.items), len(asset_list)
        )
        return DecodedArchive(manifest.items, asset_list)

    @staticmethod
    def extract_assets(filepath: Path, dest_dir: Path) -> dict[str, Path]:
        """
        Copy every asset of the archive into dest_dir.

        Returns:
            Mapping of asset filename to its extracted path. Assets that
            could not be written are logged and left out.
        """
        logger = logging.getLogger("ArchiveDAO")
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        image_map: dict[str, Path] = {}

        try:
            with zipfile.ZipFile(filepath, "r") as zf:
                for info in zf.infolist():
                    if not ArchiveDAO._is_asset_entry(info):
                        continue

                    filename = ArchiveDAO._asset_filename(info)
                    dest_path = dest_dir / filename
                    try:
                        dest_path.write_bytes(zf.read(info))
                    except (OSError, *_MEMBER_READ_ERRORS) as e:
                        logger.warning(
                            "Skipping asset: %s", AssetIOError(filename, str(e))
                        )
                        continue
                    image_map[filename] = dest_path
        except zipfile.BadZipFile as e:
            raise FormatError(f"Not a valid archive: {filepath}") from e

        logger.debug("Extracted %d assets to %s", len(image_map), dest_dir)
        return image_map

    @staticmethod
    def create_empty() -> DecodedArchive:
        """Content of a brand new document"""
        return DecodedArchive()

    @staticmethod
    def _referenced_filenames(items: list[ContentItem]) -> list[str]:
        """Distinct image filenames in document order"""
        seen: dict[str, None] = {}
        for item in items:
            if isinstance(item, ImageRef):
                seen.setdefault(item.filename, None)
        return list(seen)

    @staticmethod
    def _read_source(filename: str, source: AssetSource | None) -> bytes:
        if source is None:
            raise AssetIOError(filename, "no source available")
        if isinstance(source, bytes):
            return source
        try:
            return Path(source).read_bytes()
        except OSError as e:
            raise AssetIOError(filename, f"cannot read {source}: {e}") from e

    @staticmethod
    def _is_asset_entry(info: zipfile.ZipInfo) -> bool:
        """Files under the assets namespace; directory markers are not assets"""
        if info.is_dir() or not info.filename.startswith(settings.ASSETS_PREFIX):
            return False
        return bool(ArchiveDAO._asset_filename(info))

    @staticmethod
    def _asset_filename(info: zipfile.ZipInfo) -> str:
        return posixpath.basename(info.filename.replace("\\", "/"))

    @staticmethod
    def _atomic_write(data: bytes, output_path: Path) -> None:
        """Write to a temporary file next to output_path, then rename over it"""
        output_dir = output_path.parent
        output_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            suffix=".tmp", dir=output_dir, delete=False
        ) as temp_file:
            temp_path = temp_file.name
            try:
                _ = temp_file.write(data)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            except Exception:
                temp_file.close()
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
                raise

        try:
            os.replace(temp_path, output_path)
        except OSError:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
