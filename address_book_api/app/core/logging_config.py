"""
Logging setup for the Address Book API.

``create_app`` calls ``setup_logging`` with ``LOG_LEVEL`` and
``LOG_FILE`` from the settings.  Records go to stderr and, when
``LOG_FILE`` is set, to that file as well; both handlers share one
format.  The services log through module loggers
(``logging.getLogger(__name__)``): logins, password resets, contact
mutations, cache outages and received notifications all end up here.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger for the API process.

    The level is always applied.  Handlers are only attached when the
    root logger has none yet, so uvicorn's or pytest's handlers are left
    alone and repeated ``create_app`` calls do not duplicate output.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"info"``.  Unknown names
        fall back to ``INFO``.
    logfile : Optional[str]
        Extra file to write records to.  Its parent directory is
        created if missing.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
