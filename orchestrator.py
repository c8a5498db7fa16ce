import curses
import logging

from grid_editor import GridEditor, Mode
from grid_pane import GridPane
from screen_layout import ScreenLayout
from selection import cell_ref
from status_bar import render_header, render_status

logger = logging.getLogger(__name__)

POLL_MS = 250


class Orchestrator:
    def __init__(self, stdscr, app_state):
        self.stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        # raw mode so ^S / ^W reach the editor instead of the tty driver
        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.nodelay(False)
        self.stdscr.timeout(POLL_MS)

        self.state = app_state
        self.layout = ScreenLayout(stdscr)
        self.grid = GridPane(app_state)
        self.editor = GridEditor(app_state)

    # ---------------- UI ----------------

    def _status_context(self):
        sel = self.state.sel
        selection = sel.selection
        return {
            "status_msg": self.state.status_message,
            "cell_ref": cell_ref(*sel.cursor),
            "selection_ref": None if selection.is_single() else selection.ref(),
            "file_path": self.state.file_path,
        }

    def _header_context(self):
        return {
            "file_path": self.state.file_path,
            "sheet_name": self.state.get_active_sheet_name(),
            "sheet_index": self.state.current_sheet,
            "sheet_count": self.state.sheet_count(),
        }

    def _draw_line(self, win, text):
        win.erase()
        _, w = win.getmaxyx()
        try:
            win.addnstr(0, 0, text, max(0, w - 1), curses.A_REVERSE)
        except curses.error:
            pass
        win.refresh()

    def redraw(self):
        self._draw_line(
            self.layout.header_win, render_header(self._header_context(), self.layout.W)
        )
        self.grid.draw(self.layout.table_win)

        sw = self.layout.status_win
        if self.editor.mode is Mode.EDIT_CELL:
            sw.erase()
            cursor_x = self.editor.cell_editor.draw(sw)
            try:
                curses.curs_set(1)
                sw.move(0, min(cursor_x, self.layout.W - 1))
            except curses.error:
                pass
            sw.refresh()
        else:
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            self._draw_line(sw, render_status(self._status_context(), self.layout.W))

        if self.editor.mode is Mode.PICK_SHEET:
            self.editor.sheet_picker.draw(
                self.stdscr, self.state.get_sheet_names(), self.state.current_sheet
            )

    def _resize(self):
        curses.update_lines_cols()
        self.stdscr.clear()
        self.stdscr.refresh()
        self.layout = ScreenLayout(self.stdscr)

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()

        while not self.state.should_quit:
            self.redraw()
            ch = self.stdscr.getch()
            if ch == -1:
                continue
            if ch == curses.KEY_RESIZE:
                self._resize()
                continue
            self.editor.handle_key(ch)

        logger.info("Session closed")
