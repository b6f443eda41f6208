"""Exceptions raised by the document core"""


class TextImgError(Exception):
    """Base class for every error raised by the document core"""


class FormatError(TextImgError, ValueError):
    """The archive is not a container, or its manifest is missing or corrupt"""


class AssetIOError(TextImgError, OSError):
    """A single asset could not be read or written"""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Asset {filename!r}: {reason}")
        self.filename: str = filename
        self.reason: str = reason


class WorkspaceIOError(TextImgError, OSError):
    """A per-tab workspace directory could not be created or written"""

    def __init__(self, tab_id: str, reason: str):
        super().__init__(f"Workspace for tab {tab_id!r}: {reason}")
        self.tab_id: str = tab_id
        self.reason: str = reason
