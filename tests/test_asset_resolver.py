"""Tests for resolving image references against tab workspaces"""

import shutil
import tempfile
import zipfile
from pathlib import Path

import pytest

from textimg.errors import FormatError
from textimg.models.dao.archive_dao import ArchiveDAO
from textimg.models.elements import ImageRef, TextRun
from textimg.workspace.asset_resolver import AssetResolver
from textimg.workspace.workspace_manager import WorkspaceManager

PNG_DATA = b"\x89PNG\r\n\x1a\n" + b"pasted image" * 20
JPEG_DATA = b"\xff\xd8\xff\xe0" + b"jpeg image" * 20


class TestAssetResolver:
    """Test suite for AssetResolver class"""

    def setup_method(self):
        """Set up a scratch root and a documents folder for each test"""
        self.temp_dir: Path = Path(tempfile.mkdtemp())  # pyright: ignore[reportUninitializedInstanceVariable]
        self.docs_dir: Path = self.temp_dir / "docs"  # pyright: ignore[reportUninitializedInstanceVariable]
        self.workspaces: WorkspaceManager = WorkspaceManager(self.temp_dir / "scratch")  # pyright: ignore[reportUninitializedInstanceVariable]
        self.resolver: AssetResolver = AssetResolver(self.workspaces)  # pyright: ignore[reportUninitializedInstanceVariable]

    def teardown_method(self):
        """Clean up after each test"""
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_paste_image(self):
        """Test pasting writes the bytes into the tab's workspace"""
        document = self.resolver.new_document("tab-1")

        image = self.resolver.paste_image(document, PNG_DATA, "clipboard.png")

        assert image.filename.endswith(".png")
        assert image.render_path is not None
        render_path = Path(image.render_path)
        assert render_path.parent == self.workspaces.get("tab-1")
        assert render_path.read_bytes() == PNG_DATA
        assert document.items == []

    def test_pasted_filenames_are_unique(self):
        """Test pasting the same bytes twice gives two assets"""
        document = self.resolver.new_document("tab-1")

        first = self.resolver.paste_image(document, PNG_DATA)
        second = self.resolver.paste_image(document, PNG_DATA)

        assert first.filename != second.filename
        assert Path(first.render_path or "").exists()
        assert Path(second.render_path or "").exists()

    def test_generate_filename_extension(self):
        """Test the extension comes from the hint, else from the bytes"""
        assert AssetResolver.generate_filename(PNG_DATA).endswith(".png")
        assert AssetResolver.generate_filename(JPEG_DATA).endswith(".jpg")
        assert AssetResolver.generate_filename(PNG_DATA, "photo.JPEG").endswith(".jpeg")
        assert AssetResolver.generate_filename(JPEG_DATA, "notes.txt").endswith(".jpg")
        assert AssetResolver.generate_filename(b"unknown").endswith(".png")

    def test_paste_marks_document_modified(self):
        """Test inserting a pasted image is a change, removing it reverts"""
        document = self.resolver.new_document("tab-1")
        image = self.resolver.paste_image(document, PNG_DATA)

        document.items.append(image)
        assert document.modified

        document.items.remove(image)
        assert not document.modified

    def test_save_close_reopen(self):
        """Test text and images survive a save, a close and a reopen"""
        filepath = self.docs_dir / "saved.txti"
        document = self.resolver.new_document("tab-1")
        image = self.resolver.paste_image(document, PNG_DATA)
        document.items.extend([TextRun("Caption line\nsecond line"), image])
        assert document.modified

        encoded = self.resolver.save_document(document, filepath)

        assert encoded.skipped == []
        assert document.file_path == filepath
        assert not document.modified

        old_render_path = Path(image.render_path or "")
        assert self.resolver.close_document("tab-1") is True
        assert not old_render_path.exists()

        reopened = self.resolver.open_document("tab-2", filepath)

        assert reopened.items == document.items
        assert reopened.items[0] == TextRun("Caption line\nsecond line")
        reopened_image = reopened.images[0]
        assert reopened_image.filename == image.filename
        assert reopened_image.render_path is not None
        assert Path(reopened_image.render_path).read_bytes() == PNG_DATA
        assert not reopened.modified

    def test_open_resolves_render_paths(self):
        """Test opening points every image at the tab's workspace"""
        filepath = self.docs_dir / "doc.txti"
        _ = ArchiveDAO.write(
            [ImageRef("a.png"), TextRun("x"), ImageRef("b.jpg")],
            {"a.png": PNG_DATA, "b.jpg": JPEG_DATA},
            filepath,
        )

        document = self.resolver.open_document("tab-1", filepath)

        workspace = self.workspaces.get("tab-1")
        assert document.image_map() == {
            "a.png": str(workspace / "a.png"),
            "b.jpg": str(workspace / "b.jpg"),
        }
        assert self.resolver.image_map(document) == document.image_map()
        assert document.file_path == filepath

    def test_open_with_missing_asset(self):
        """Test an image whose asset is absent stays unresolved"""
        filepath = self.docs_dir / "doc.txti"
        _ = ArchiveDAO.write([ImageRef("lost.png")], {}, filepath)

        document = self.resolver.open_document("tab-1", filepath)

        assert document.images[0].render_path is None
        assert not document.modified

    def test_open_missing_manifest(self):
        """Test a broken archive produces no document and no workspace"""
        filepath = self.docs_dir / "broken.txti"
        filepath.parent.mkdir(parents=True)
        with zipfile.ZipFile(filepath, "w") as zf:
            zf.writestr("assets/a.png", PNG_DATA)

        with pytest.raises(FormatError):
            _ = self.resolver.open_document("tab-1", filepath)

        assert self.workspaces.get("tab-1") is None

    def test_save_skips_unreadable_image(self):
        """Test an image whose file disappeared does not fail the save"""
        filepath = self.docs_dir / "doc.txti"
        document = self.resolver.new_document("tab-1")
        kept = self.resolver.paste_image(document, PNG_DATA)
        lost = self.resolver.paste_image(document, JPEG_DATA)
        document.items.extend([kept, TextRun("between"), lost])
        Path(lost.render_path or "").unlink()

        encoded = self.resolver.save_document(document, filepath)

        assert encoded.skipped == [lost.filename]
        assert not document.modified
        decoded = ArchiveDAO.decode(filepath)
        assert decoded.items == document.items
        assert decoded.asset_list == [kept.filename]

    def test_save_reads_images_outside_workspace(self):
        """Test images resolved elsewhere are read from their render path"""
        external = self.temp_dir / "external.png"
        external.write_bytes(PNG_DATA)
        filepath = self.docs_dir / "doc.txti"
        document = self.resolver.new_document("tab-1")
        document.items.append(ImageRef("external.png", render_path=str(external)))

        encoded = self.resolver.save_document(document, filepath)

        assert encoded.skipped == []
        image_map = ArchiveDAO.extract_assets(filepath, self.temp_dir / "check")
        assert image_map["external.png"].read_bytes() == PNG_DATA

    def test_save_as_keeps_assets(self):
        """Test saving an opened document elsewhere carries its images"""
        original = self.docs_dir / "original.txti"
        _ = ArchiveDAO.write([ImageRef("a.png")], {"a.png": PNG_DATA}, original)
        document = self.resolver.open_document("tab-1", original)
        document.items.append(TextRun("added"))

        copy = self.docs_dir / "copy.txti"
        _ = self.resolver.save_document(document, copy)

        assert document.file_path == copy
        assert ArchiveDAO.decode(copy).asset_list == ["a.png"]
        assert ArchiveDAO.decode(original).items == [ImageRef("a.png")]

    def test_save_without_path(self):
        """Test saving a draft needs a path"""
        document = self.resolver.new_document("tab-1")
        document.items.append(TextRun("draft"))

        with pytest.raises(ValueError):
            _ = self.resolver.save_document(document)

        assert document.modified

    def test_save_to_current_path(self):
        """Test a saved document can be saved again without a path"""
        filepath = self.docs_dir / "doc.txti"
        document = self.resolver.new_document("tab-1")
        document.items.append(TextRun("v1"))
        _ = self.resolver.save_document(document, filepath)

        document.items[0] = TextRun("v2")
        assert document.modified
        _ = self.resolver.save_document(document)

        assert not document.modified
        assert ArchiveDAO.decode(filepath).items == [TextRun("v2")]
