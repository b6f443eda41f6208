"""Per-tab temporary directories holding the materialized assets of a document"""

import base64
import binascii
import logging
import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path

from textimg.errors import AssetIOError, WorkspaceIOError


class WorkspaceManager:
    """
    Owns one scratch directory per open tab.

    Directories live at `<scratch_root>/<tab_id>`. They are created on the
    first request for a tab and removed on close. No other component
    creates or deletes them.
    """

    def __init__(self, scratch_root: Path):
        self._scratch_root: Path = Path(scratch_root).resolve()
        self._workspaces: dict[str, Path] = {}
        self.logger: logging.Logger = logging.getLogger("Workspace")

    @property
    def scratch_root(self) -> Path:
        return self._scratch_root

    @property
    def tab_ids(self) -> list[str]:
        """Tabs with a live workspace"""
        return list(self._workspaces)

    def path_for(self, tab_id: str) -> Path:
        """The deterministic workspace location of a tab, whether or not it exists"""
        if not tab_id or tab_id in (".", "..") or "/" in tab_id or "\\" in tab_id:
            raise WorkspaceIOError(tab_id, "tab id is not a valid directory name")
        path = (self._scratch_root / tab_id).resolve()
        if path.parent != self._scratch_root:
            raise WorkspaceIOError(tab_id, "resolves outside the scratch root")
        return path

    def get(self, tab_id: str) -> Path | None:
        """The registered workspace of a tab, without creating it"""
        return self._workspaces.get(tab_id)

    def get_or_create(self, tab_id: str) -> Path:
        """Return the workspace of the tab, creating the directory on first use"""
        existing = self._workspaces.get(tab_id)
        if existing is not None:
            return existing

        path = self.path_for(tab_id)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkspaceIOError(tab_id, f"cannot create {path}: {e}") from e

        self._workspaces[tab_id] = path
        self.logger.debug("Created workspace %s", path)
        return path

    def read_asset_bytes(
        self, tab_id: str, filenames: Iterable[str]
    ) -> dict[str, bytes]:
        """Raw bytes of the requested assets that exist in the tab's workspace"""
        workspace = self._workspaces.get(tab_id)
        if workspace is None:
            return {}

        result: dict[str, bytes] = {}
        for filename in filenames:
            file_path = self._asset_path(workspace, filename)
            if file_path is None or not file_path.is_file():
                continue
            try:
                result[filename] = file_path.read_bytes()
            except OSError as e:
                self.logger.warning(
                    "Skipping asset: %s", AssetIOError(filename, str(e))
                )
        return result

    def read_assets(self, tab_id: str, filenames: Iterable[str]) -> dict[str, str]:
        """Base64 contents of the requested assets that exist in the tab's workspace"""
        return {
            filename: base64.b64encode(data).decode("ascii")
            for filename, data in self.read_asset_bytes(tab_id, filenames).items()
        }

    def write_asset_bytes(self, tab_id: str, filename: str, data: bytes) -> Path:
        """Write one asset into the tab's workspace and return its absolute path"""
        workspace = self.get_or_create(tab_id)
        file_path = self._asset_path(workspace, filename)
        if file_path is None:
            raise WorkspaceIOError(tab_id, f"invalid asset filename {filename!r}")
        try:
            file_path.write_bytes(data)
        except OSError as e:
            raise WorkspaceIOError(tab_id, f"cannot write {file_path}: {e}") from e
        return file_path

    def write_assets(
        self, tab_id: str, encoded_assets: Mapping[str, str]
    ) -> dict[str, Path]:
        """
        Write base64 encoded assets into the tab's workspace.

        Returns:
            Mapping of filename to absolute path, only for the entries written
        """
        workspace = self.get_or_create(tab_id)
        written: dict[str, Path] = {}

        for filename, encoded in encoded_assets.items():
            file_path = self._asset_path(workspace, filename)
            if file_path is None:
                self.logger.warning("Ignoring invalid asset filename %r", filename)
                continue
            try:
                data = base64.b64decode(encoded, validate=True)
                file_path.write_bytes(data)
            except (binascii.Error, ValueError, OSError) as e:
                self.logger.warning(
                    "Skipping asset: %s", AssetIOError(filename, str(e))
                )
                continue
            written[filename] = file_path

        return written

    def close(self, tab_id: str) -> bool:
        """Remove the tab's workspace. Always succeeds, even if nothing existed."""
        path = self._workspaces.pop(tab_id, None)
        if path is None:
            try:
                path = self.path_for(tab_id)
            except WorkspaceIOError:
                return True

        if path.exists():
            try:
                shutil.rmtree(path)
                self.logger.debug("Removed workspace %s", path)
            except OSError as e:
                self.logger.warning("Could not fully remove workspace %s: %s", path, e)
        return True

    def close_all(self) -> None:
        """Remove every registered workspace"""
        for tab_id in list(self._workspaces):
            _ = self.close(tab_id)

    @staticmethod
    def _asset_path(workspace: Path, filename: str) -> Path | None:
        """Path of an asset inside the workspace, or None for unsafe names"""
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            return None
        return workspace / filename
