"""
Logging setup for the Apparel API.

``setup_logging`` installs one console handler on the root logger and,
when ``LOG_FILE`` is set, a size-rotated file handler next to it.
Request access lines from uvicorn and multipart parser chatter are
kept at WARNING unless the API itself runs at DEBUG.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

NOISY_LOGGERS = ("uvicorn.access", "multipart", "python_multipart")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : str
        Level name such as ``"debug"`` or ``"INFO"``; unknown names
        fall back to INFO.
    logfile : Optional[str]
        File to append to, rotated at ``LOG_FILE_MAX_BYTES``.  Parent
        directories are created.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured, e.g. by uvicorn or a previous create_app().
        return

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if logfile:
        path = Path(logfile).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        rotating.setFormatter(formatter)
        root.addHandler(rotating)

    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
