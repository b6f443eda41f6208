import datetime
import logging
from pathlib import Path
from typing_extensions import override

from textimg.config import settings

FILE_FORMAT = "%(asctime)s - [%(name)s] - %(levelname)s - [%(module)s] - %(message)s"


def configure_logging(
    console_level: int = logging.INFO, log_dir: Path | None = None
) -> Path:
    """Log everything to a timestamped file and the console at console_level.

    Calling it again replaces the handlers it installed before.
    Returns the path of the log file.
    """
    log_dir = Path(log_dir) if log_dir is not None else settings.LOGGING_DIR_PATH
    log_dir.mkdir(parents=True, exist_ok=True)
    now = datetime.datetime.now().strftime("%Y-%m-%d-%H-%M")
    log_file = log_dir / f"{now}.log"

    file_handler = logging.FileHandler(log_file, encoding="UTF-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ColorFormatter())

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "textimg_handler", False):
            root_logger.removeHandler(handler)
            handler.close()
    for handler in (file_handler, console_handler):
        handler.textimg_handler = True  # pyright: ignore[reportAttributeAccessIssue]
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    # pydantic logs its validation internals at DEBUG
    logging.getLogger("pydantic").setLevel(logging.WARNING)
    return log_file


class ColorFormatter(logging.Formatter):
    """Console formatter colouring each record by its level"""

    grey: str = "\x1b[38;20m"
    yellow: str = "\x1b[33;20m"
    red: str = "\x1b[31;20m"
    bold_red: str = "\x1b[31;1m"
    reset: str = "\x1b[0m"
    custom_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    COLORS = {
        logging.DEBUG: grey,
        logging.INFO: grey,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def __init__(self):
        super().__init__(self.custom_format)
        self._formatters: dict[int, logging.Formatter] = {
            level: logging.Formatter(color + self.custom_format + self.reset)
            for level, color in self.COLORS.items()
        }

    @override
    def format(self, record):
        formatter = self._formatters.get(record.levelno)
        if formatter is None:
            return super().format(record)
        return formatter.format(record)
