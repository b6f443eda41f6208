"""
Contains the configuration options for the TextImg document core
"""

import json
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings

USERPROFILE: Path = Path(os.getenv("userprofile", os.getenv("HOME", "")))
BASE_FOLDER: Path = (USERPROFILE / ".textimg").resolve()
SETTINGS_FILE_PATH: Path = BASE_FOLDER / "config.json"


class Settings(BaseSettings):
    """Settings class for the TextImg document core"""

    DATA_DIR_PATH: Path = BASE_FOLDER / "data"
    LOGGING_DIR_PATH: Path = DATA_DIR_PATH / "logging"
    SESSION_FILE_PATH: Path = DATA_DIR_PATH / "session.json"
    SCRATCH_ROOT: Path = Path(tempfile.gettempdir()) / "txti-editor"

    # Archive
    ARCHIVE_EXTENSION: str = ".txti"
    MANIFEST_NAME: str = "content.json"
    ASSETS_PREFIX: str = "assets/"
    MANIFEST_VERSION: int = 1
    DEFAULT_IMAGE_EXTENSION: str = ".png"

    # Tabs
    UNTITLED_TITLE: str = "Untitled"
    TAB_TITLE_LENGTH: int = 15

    class SERIALIZATION_KEYS(Enum):
        """Value used as the keys for the serialization"""

        VERSION = "version"
        CONTENT = "content"
        ITEM_TYPE = "type"
        TEXT_VALUE = "val"
        IMAGE_SOURCE = "src"
        IMAGE_WIDTH = "width"

    @classmethod
    def load_from_file(cls, path: Path) -> "Settings":
        """Loads settings from a JSON file."""
        if not path.exists():
            return cls()  # Return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            logging.getLogger("Config").error("Error loading settings: %s", e)
            return cls()  # Return defaults

    def save_to_file(self, path: Path):
        """Saves settings to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, "w", encoding="utf-8") as f:
                _ = f.write(self.model_dump_json(indent=2))
        except (FileNotFoundError, OSError, IOError) as e:
            logging.getLogger("Config").error("Error saving settings: %s", e)


settings = Settings.load_from_file(Path(SETTINGS_FILE_PATH))
