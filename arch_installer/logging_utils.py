from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/arch-installer.log"
FALLBACK_LOG_NAME = "arch-installer.log"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every command, decision and step transition goes to the log file.

    Notes:
    - The live ISO normally allows writing to /var/log. If it doesn't, we fall
      back to a file in the current working directory.
    - The file handler always records DEBUG (command output); `level` applies
      to the console.

    Returns the actual file path being used.
    """

    root = logging.getLogger()

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(root, "_arch_installer_configured", False):
        return getattr(root, "_arch_installer_log_path", log_path)

    root.setLevel(logging.DEBUG)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        # Fall back to a writable location.
        chosen_path = str(Path.cwd() / FALLBACK_LOG_NAME)
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        console.setLevel(level)
        root.addHandler(console)

    setattr(root, "_arch_installer_configured", True)
    setattr(root, "_arch_installer_log_path", chosen_path)

    logging.getLogger(__name__).info("Logging initialized (requested=%s, actual=%s)", log_path, chosen_path)
    return chosen_path
