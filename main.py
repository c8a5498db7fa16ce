import curses
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

from app_state import AppState
from config_paths import load_config
from logging_setup import configure_logging
from orchestrator import Orchestrator
from xlsx_document import DocumentError, XlsxDocument

try:
    __version__ = version("sheetgrid")
except PackageNotFoundError:
    __version__ = "0.0.0"

USAGE = (
    "sheetgrid - terminal-based XLSX editor\n\n"
    "Usage:\n"
    "  sheetgrid PATH        open PATH (created on save if missing)\n"
    "  sheetgrid --debug PATH\n"
    "  sheetgrid -v\n"
)

logger = logging.getLogger(__name__)


def parse_args(args):
    """Return (action, path, debug); action is one of run, version, help, usage."""
    if "-v" in args or "-V" in args:
        return "version", None, False
    if "-h" in args or "--help" in args:
        return "help", None, False

    debug = "--debug" in args
    rest = [a for a in args if a != "--debug"]
    if len(rest) != 1 or rest[0].startswith("-"):
        return "usage", None, debug
    return "run", rest[0], debug


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    action, path, debug = parse_args(args)

    if action == "version":
        print(__version__)
        return 0
    if action == "help":
        print(USAGE)
        return 0
    if action == "usage":
        print(USAGE, file=sys.stderr)
        return 2

    cfg = load_config()
    configure_logging(level=cfg["LOG_LEVEL"], debug=debug)

    try:
        document = XlsxDocument.open_or_create(path)
    except DocumentError as exc:
        logger.error("Load failed for %s: %s", path, exc)
        print(f"Load failed: {exc}", file=sys.stderr)
        return 1

    state = AppState(document, path, cfg)

    def curses_main(stdscr):
        Orchestrator(stdscr, state).run()

    curses.wrapper(curses_main)
    return 0


if __name__ == "__main__":
    sys.exit(main())
