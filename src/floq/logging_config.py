"""Logging setup shared by the CLI and the TUI."""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """Configure root logging.

    Args:
        level: Log level name.
        log_file: Write to this file instead of stderr. The TUI passes one so
            log lines never land on the screen.
    """
    handlers: list[logging.Handler]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    else:
        handlers = [logging.StreamHandler()]

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    # SQLAlchemy engine logging is noisy below WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
