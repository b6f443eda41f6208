"""Methods to save and load the editor session"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from textimg.models.session import SessionData


class SessionDAO:
    """Contains methods to save and load the SessionData"""

    @staticmethod
    def save(session: SessionData, filepath: Path) -> None:
        """Saves the session as JSON, replacing the previous file atomically"""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        logging.getLogger("SessionDAO").debug(
            "Saving session with %d tabs to %s", len(session.tabs), filepath
        )

        with tempfile.NamedTemporaryFile(
            "w", suffix=".tmp", dir=filepath.parent, delete=False, encoding="utf-8"
        ) as f:
            temp_path = f.name
            _ = f.write(session.model_dump_json(indent=2))

        try:
            os.replace(temp_path, filepath)
        except OSError:
            os.unlink(temp_path)
            raise

    @staticmethod
    def load(filepath: Path) -> SessionData:
        """Loads the session, or returns an empty one if missing or unreadable"""
        filepath = Path(filepath)
        if not filepath.exists():
            logging.getLogger("SessionDAO").debug(
                "Session file does not exist, returning an empty session"
            )
            return SessionData()

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return SessionData.model_validate_json(f.read())
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logging.getLogger("SessionDAO").error("Error loading session: %s", e)
            return SessionData()
