import curses
import logging
from enum import Enum

from cell_editor import CellEditor
from mark_codec import mark_for_key
from sheet_picker import SheetPicker

logger = logging.getLogger(__name__)

KEY_ESC = 27
KEY_TAB = 9
KEY_CTRL_S = 19
KEY_CTRL_W = 23
ENTER_KEYS = (10, 13, curses.KEY_ENTER)

CTRL_HOME_NAMES = (b"kHOM5",)
CTRL_END_NAMES = (b"kEND5",)

# (dx, dy, extend)
MOVES = {
    ord("w"): (0, -1, False),
    ord("a"): (-1, 0, False),
    ord("s"): (0, 1, False),
    ord("d"): (1, 0, False),
    ord("W"): (0, -1, True),
    ord("A"): (-1, 0, True),
    ord("S"): (0, 1, True),
    ord("D"): (1, 0, True),
    curses.KEY_UP: (0, -1, False),
    curses.KEY_DOWN: (0, 1, False),
    curses.KEY_LEFT: (-1, 0, False),
    curses.KEY_RIGHT: (1, 0, False),
    curses.KEY_SR: (0, -1, True),
    curses.KEY_SF: (0, 1, True),
    curses.KEY_SLEFT: (-1, 0, True),
    curses.KEY_SRIGHT: (1, 0, True),
    KEY_TAB: (1, 0, False),
    curses.KEY_BTAB: (-1, 0, False),
    10: (0, 1, False),
    13: (0, 1, False),
    curses.KEY_ENTER: (0, 1, False),
}


class Mode(Enum):
    NAVIGATE = "navigate"
    EDIT_CELL = "edit"
    PICK_SHEET = "sheets"


def _extended_name(ch) -> bytes:
    """Terminal name for modifier-combined keys that curses has no constant for."""
    if ch <= curses.KEY_MAX:
        return b""
    try:
        return curses.keyname(ch)
    except (ValueError, curses.error):
        return b""


class GridEditor:
    """Routes key events to the component that owns the active mode."""

    def __init__(self, state):
        self.state = state
        self.mode = Mode.NAVIGATE
        self.cell_editor = CellEditor()
        self.sheet_picker = SheetPicker()

    # ---------- public API ----------
    def handle_key(self, ch):
        if ch == -1:
            return
        self.state.status_message = None

        if self.mode is Mode.EDIT_CELL:
            self._handle_edit(ch)
        elif self.mode is Mode.PICK_SHEET:
            self._handle_pick_sheet(ch)
        else:
            self._handle_navigate(ch)

    # ---------- navigate ----------
    def _handle_navigate(self, ch):
        state = self.state
        sel = state.sel

        if ch == KEY_CTRL_W:
            state.should_quit = True
            return
        if ch == KEY_CTRL_S:
            state.save()
            return

        if ch in (ord("c"), curses.KEY_F5):
            state.copy_selection()
            return
        if ch in (ord("v"), curses.KEY_F6):
            state.paste_clipboard()
            return
        if ch == ord("e"):
            state.widen_column()
            return
        if ch == ord("r"):
            state.shrink_column()
            return
        if ch == curses.KEY_F2:
            self.start_edit()
            return
        if ch == curses.KEY_F4:
            self.open_sheet_picker()
            return

        if ord("1") <= ch <= ord("6"):
            state.set_mark_for_selection(mark_for_key(chr(ch)))
            return

        if ch in MOVES:
            dx, dy, extend = MOVES[ch]
            sel.move(dx, dy, extend)
            return

        if ch == curses.KEY_PPAGE:
            state.switch_sheet(-1)
            return
        if ch == curses.KEY_NPAGE:
            state.switch_sheet(1)
            return

        if ch == curses.KEY_HOME:
            sel.jump_to_row_start()
            return
        if ch == curses.KEY_END:
            state.jump_to_row_end()
            return

        name = _extended_name(ch)
        if name in CTRL_HOME_NAMES:
            sel.jump_to_start()
            return
        if name in CTRL_END_NAMES:
            state.jump_to_end()
            return

        if ch == KEY_ESC:
            sel.clear_selection()

    # ---------- edit cell ----------
    def start_edit(self) -> bool:
        state = self.state
        cell = state.current_cell()
        if cell.formula:
            state.status_message = f"Formula (read-only): ={cell.formula}"
            return False
        self.cell_editor.start(cell.value_text)
        self.mode = Mode.EDIT_CELL
        return True

    def cancel_edit(self):
        self.cell_editor.reset()
        self.mode = Mode.NAVIGATE

    def commit_edit(self, dx: int, dy: int):
        logger.debug("Commit %r at %s", self.cell_editor.text(), self.state.sel.cursor)
        self.state.write_current_cell(self.cell_editor.text())
        self.cell_editor.reset()
        self.mode = Mode.NAVIGATE
        self.state.sel.move(dx, dy, False)

    def _handle_edit(self, ch):
        if ch == KEY_ESC:
            self.cancel_edit()
            return
        if ch in ENTER_KEYS:
            self.commit_edit(0, 1)
            return
        if ch == KEY_TAB:
            self.commit_edit(1, 0)
            return
        self.cell_editor.handle_key(ch)

    # ---------- pick sheet ----------
    def open_sheet_picker(self):
        self.sheet_picker.open(self.state.current_sheet)
        self.mode = Mode.PICK_SHEET

    def confirm_sheet(self):
        logger.debug("Switching to sheet %d", self.sheet_picker.index)
        self.state.set_active_sheet(self.sheet_picker.index)
        self.mode = Mode.NAVIGATE

    def _handle_pick_sheet(self, ch):
        if ch == KEY_ESC:
            self.mode = Mode.NAVIGATE
        elif ch in ENTER_KEYS:
            self.confirm_sheet()
        elif ch in (ord("w"), curses.KEY_UP):
            self.sheet_picker.move(-1, self.state.sheet_count())
        elif ch in (ord("s"), curses.KEY_DOWN):
            self.sheet_picker.move(1, self.state.sheet_count())
