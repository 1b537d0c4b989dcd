from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/archway-installer.log"
FALLBACK_LOG_NAME = "archway-installer.log"


def _open_log_file(log_path: str, fallback_dir: Optional[str]) -> logging.FileHandler:
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path)
    except OSError:
        return logging.FileHandler(str(Path(fallback_dir or Path.cwd()) / FALLBACK_LOG_NAME))


def configure_logging(log_path: str = DEFAULT_LOG_PATH, fallback_dir: Optional[str] = None) -> str:
    """Send INFO and above to a log file and the console, once per process.

    The post-boot phase usually runs as the installed (non-root) user, so
    /var/log may not be writable. In that case the log goes to fallback_dir
    (the directory holding the phase marker) or the current directory.

    Returns the log file actually written.
    """

    root = logging.getLogger()
    if getattr(root, "_archway_log_path", None):
        return root._archway_log_path  # type: ignore[attr-defined]

    root.setLevel(logging.INFO)
    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler = _open_log_file(log_path, fallback_dir)
    console = logging.StreamHandler()
    for h in (file_handler, console):
        h.setFormatter(fmt)
        root.addHandler(h)

    root._archway_log_path = file_handler.baseFilename  # type: ignore[attr-defined]
    logging.getLogger(__name__).info("Logging to %s (requested %s)", file_handler.baseFilename, log_path)
    return file_handler.baseFilename
