import logging
from logging.handlers import RotatingFileHandler

import config_paths


def configure_logging(*, level: str = "INFO", debug: bool = False, log_path: str | None = None) -> None:
    """Send application logs to a rotating file.

    Nothing goes to the console: curses owns the terminal while the editor runs.
    """
    resolved = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    if log_path is None:
        config_paths.ensure_config_dirs()
        log_path = config_paths.LOG_PATH

    root = logging.getLogger()
    root.setLevel(resolved)

    # Avoid duplicating handlers if called more than once.
    if getattr(root, "_sheetgrid_configured", False):
        return

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    file_handler.setLevel(resolved)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    setattr(root, "_sheetgrid_configured", True)
