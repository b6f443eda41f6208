"""
Tab Manager - Registry of the open documents.

Maps each tab id to its document, keeps the tab order and the active tab,
and drives the asset resolver with the open/save/close granularity of the
tab lifecycle. It can also persist and restore the whole session.
"""

import logging
import time
from pathlib import Path

from textimg.errors import FormatError
from textimg.models.dao.archive_dao import EncodedArchive
from textimg.models.dao.session_dao import SessionDAO
from textimg.models.document import Document
from textimg.models.elements import ContentItemFactory
from textimg.models.session import SessionData, SessionTab
from textimg.workspace.asset_resolver import AssetResolver


class TabManager:
    """Keeps track of the open tabs and their documents"""

    def __init__(self, resolver: AssetResolver):
        self.resolver: AssetResolver = resolver
        self.logger: logging.Logger = logging.getLogger("TabManager")
        self._tabs: dict[str, Document] = {}
        self._tab_order: list[str] = []
        self._active_tab_id: str | None = None
        self._tab_counter: int = 0

    def generate_tab_id(self) -> str:
        """A tab id that is unique within this process"""
        self._tab_counter += 1
        return f"tab-{int(time.time() * 1000)}-{self._tab_counter}"

    @property
    def tab_order(self) -> list[str]:
        return list(self._tab_order)

    @property
    def active(self) -> Document | None:
        """The document of the active tab"""
        if self._active_tab_id is None:
            return None
        return self._tabs.get(self._active_tab_id)

    def get(self, tab_id: str) -> Document | None:
        return self._tabs.get(tab_id)

    def __contains__(self, tab_id: str) -> bool:
        return tab_id in self._tabs

    def __len__(self) -> int:
        return len(self._tabs)

    def _register(self, document: Document) -> Document:
        self._tabs[document.tab_id] = document
        self._tab_order.append(document.tab_id)
        self._active_tab_id = document.tab_id
        return document

    def new_tab(self, tab_id: str | None = None) -> Document:
        """Open an empty draft in a new tab and make it active"""
        tab_id = tab_id or self.generate_tab_id()
        if tab_id in self._tabs:
            raise ValueError(f"Tab {tab_id!r} is already open")
        self.logger.debug("New tab %s", tab_id)
        return self._register(self.resolver.new_document(tab_id))

    def find_by_path(self, filepath: Path) -> Document | None:
        """The open document saved at filepath, if any"""
        target = Path(filepath).resolve()
        for document in self._tabs.values():
            if document.file_path is None:
                continue
            if document.file_path.resolve() == target:
                return document
        return None

    def open(self, filepath: Path, tab_id: str | None = None) -> Document:
        """
        Open an archive in a new tab, or switch to the tab already showing it.

        Raises:
            FormatError: the archive cannot be read; no tab is created
        """
        existing = self.find_by_path(filepath)
        if existing is not None:
            self.logger.debug("%s already open in %s", filepath, existing.tab_id)
            return self.switch_to(existing.tab_id)

        tab_id = tab_id or self.generate_tab_id()
        if tab_id in self._tabs:
            raise ValueError(f"Tab {tab_id!r} is already open")
        try:
            document = self.resolver.open_document(tab_id, Path(filepath))
        except FormatError:
            _ = self.resolver.close_document(tab_id)
            raise
        return self._register(document)

    def save(
        self, tab_id: str | None = None, filepath: Path | None = None
    ) -> EncodedArchive:
        """Save the tab's document, to filepath if given (save as)"""
        document = self._require(tab_id)
        return self.resolver.save_document(document, filepath)

    def switch_to(self, tab_id: str) -> Document:
        """Make the tab active. Workspaces are left untouched."""
        document = self._require(tab_id)
        self._active_tab_id = tab_id
        return document

    def close(self, tab_id: str) -> bool:
        """Close the tab and tear down its workspace"""
        if tab_id in self._tabs:
            index = self._tab_order.index(tab_id)
            del self._tabs[tab_id]
            self._tab_order.remove(tab_id)

            if self._active_tab_id == tab_id:
                if self._tab_order:
                    index = min(index, len(self._tab_order) - 1)
                    self._active_tab_id = self._tab_order[index]
                else:
                    self._active_tab_id = None

        self.logger.debug("Closing tab %s", tab_id)
        return self.resolver.close_document(tab_id)

    def close_all(self) -> None:
        for tab_id in list(self._tab_order):
            _ = self.close(tab_id)
        self.resolver.workspaces.close_all()

    def move(self, tab_id: str, new_index: int) -> None:
        """Reorder a tab"""
        _ = self._require(tab_id)
        self._tab_order.remove(tab_id)
        new_index = max(0, min(new_index, len(self._tab_order)))
        self._tab_order.insert(new_index, tab_id)

    def modified_tabs(self) -> list[Document]:
        """Documents with unsaved changes, in tab order"""
        documents = [self._tabs[tab_id] for tab_id in self._tab_order]
        return [document for document in documents if document.modified]

    def _require(self, tab_id: str | None) -> Document:
        tab_id = tab_id or self._active_tab_id
        if tab_id is None or tab_id not in self._tabs:
            raise KeyError(f"No open tab {tab_id!r}")
        return self._tabs[tab_id]

    def to_session(self) -> SessionData:
        """Capture the open tabs, including the images of unsaved work"""
        tabs: list[SessionTab] = []
        for tab_id in self._tab_order:
            document = self._tabs[tab_id]
            tab = SessionTab(
                id=tab_id,
                file_path=document.file_path,
                title=document.title(),
                content=[item.to_dict() for item in document.items],
            )
            if document.is_draft or document.modified:
                filenames = [image.filename for image in document.images]
                tab.temp_image_data = self.resolver.workspaces.read_assets(
                    tab_id, filenames
                )
            tabs.append(tab)

        return SessionData(
            tabs=tabs,
            tab_order=list(self._tab_order),
            active_tab_id=self._active_tab_id,
        )

    def save_session(self, filepath: Path) -> None:
        SessionDAO.save(self.to_session(), filepath)

    def restore_session(self, filepath: Path) -> list[Document]:
        """
        Reopen the tabs of a saved session.

        Saved tabs are reopened from their archive, then their unsaved
        content is laid over it, so the modified flag reflects the
        difference with the file on disk.
        """
        session = SessionDAO.load(filepath)
        restored: list[Document] = []

        for tab in session.tabs:
            if tab.id in self._tabs:
                continue
            try:
                items = ContentItemFactory.from_list(tab.content)
            except FormatError as e:
                self.logger.error("Dropping tab %s from session: %s", tab.id, e)
                continue

            document = None
            if tab.file_path is not None:
                try:
                    document = self.resolver.open_document(tab.id, tab.file_path)
                except (FormatError, OSError) as e:
                    self.logger.warning(
                        "Cannot reopen %s, restoring as draft: %s", tab.file_path, e
                    )
            if document is None:
                document = self.resolver.new_document(tab.id)

            image_map = {
                image.filename: Path(image.render_path)
                for image in document.images
                if image.render_path is not None
            }
            image_map.update(
                self.resolver.workspaces.write_assets(tab.id, tab.temp_image_data)
            )
            document.items = items
            self.resolver.resolve(document.items, image_map)

            self._register(document)
            restored.append(document)

        order = [tab_id for tab_id in session.tab_order if tab_id in self._tabs]
        order += [tab_id for tab_id in self._tab_order if tab_id not in order]
        self._tab_order = order

        if session.active_tab_id in self._tabs:
            self._active_tab_id = session.active_tab_id
        elif self._tab_order:
            self._active_tab_id = self._tab_order[0]

        self.logger.info("Restored %d tabs from session", len(restored))
        return restored
