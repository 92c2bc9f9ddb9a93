from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/mulecube-installer.log"

_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}


class LabelFormatter(logging.Formatter):
    """Console format: `[WARN] message`."""

    def format(self, record: logging.LogRecord) -> str:
        label = _LABELS.get(record.levelno, record.levelname)
        return f"[{label}] {record.getMessage()}"


def configure_logging(
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure logging.

    All commands (DEBUG) and decisions are recorded to
    /var/log/mulecube-installer.log; the operator sees labeled lines on the
    console.

    Notes:
    - When /var/log is not writable we fall back to a file in the working
      directory and report the actual path.
    - log_path=None configures the console only (used by the stack helpers).

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_mulecube_configured", False):
        return getattr(logger, "_mulecube_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    if log_path is not None:
        fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler: logging.Handler = logging.FileHandler(log_path)
        except OSError:
            chosen_path = str(Path.cwd() / "mulecube-installer.log")
            file_handler = logging.FileHandler(chosen_path)
        file_handler.setFormatter(fmt)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(LabelFormatter())
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_mulecube_configured", True)
    setattr(logger, "_mulecube_log_path", chosen_path)

    if log_path is not None:
        logging.getLogger(__name__).debug(
            "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
        )
    return chosen_path
