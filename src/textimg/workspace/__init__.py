"""
Workspace module for the TextImg document core.

Materializes embedded assets in per-tab scratch directories and keeps the
image references of open documents pointed at them.
"""

from textimg.workspace.asset_resolver import AssetResolver
from textimg.workspace.tab_manager import TabManager
from textimg.workspace.workspace_manager import WorkspaceManager

__all__ = [
    "AssetResolver",
    "TabManager",
    "WorkspaceManager",
]
