import curses

from openpyxl.utils import get_column_letter

from mark_codec import Mark
from viewport import ROW_NUMBER_WIDTH, visible_extent


class GridPane:
    PAIR_CURSOR = 1
    PAIR_SELECTED = 2
    PAIR_FORMULA = 3
    PAIR_YELLOW_BG = 4
    PAIR_RED_TEXT = 5
    PAIR_GREEN_TEXT = 6
    PAIR_BLUE_BG = 7
    PAIR_MAGENTA_TEXT = 8

    MARK_PAIRS = {
        Mark.YELLOW_BG: PAIR_YELLOW_BG,
        Mark.RED_TEXT: PAIR_RED_TEXT,
        Mark.GREEN_TEXT: PAIR_GREEN_TEXT,
        Mark.BLUE_BG: PAIR_BLUE_BG,
        Mark.MAGENTA_TEXT: PAIR_MAGENTA_TEXT,
    }

    def __init__(self, state):
        self.state = state
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CURSOR, curses.COLOR_WHITE, curses.COLOR_BLUE)
            curses.init_pair(self.PAIR_SELECTED, curses.COLOR_WHITE, curses.COLOR_BLACK)
            curses.init_pair(self.PAIR_FORMULA, curses.COLOR_CYAN, -1)
            curses.init_pair(self.PAIR_YELLOW_BG, curses.COLOR_BLACK, curses.COLOR_YELLOW)
            curses.init_pair(self.PAIR_RED_TEXT, curses.COLOR_RED, -1)
            curses.init_pair(self.PAIR_GREEN_TEXT, curses.COLOR_GREEN, -1)
            curses.init_pair(self.PAIR_BLUE_BG, curses.COLOR_BLACK, curses.COLOR_CYAN)
            curses.init_pair(self.PAIR_MAGENTA_TEXT, curses.COLOR_MAGENTA, -1)
        except curses.error:
            pass

    def layout(self, win):
        """Recompute the viewport for ``win`` and hand it to the selection model."""
        h, w = win.getmaxyx()
        start_col = self.state.sel.scroll[1] + 1
        size = visible_extent(w, h, start_col, self.state.column_width)
        self.state.sel.viewport_size = size
        return size

    def cell_attr(self, row, col):
        state = self.state
        is_formula = state.is_formula_cell(row, col)
        italic = curses.A_ITALIC if is_formula else 0
        if (row, col) == state.sel.cursor:
            return curses.color_pair(self.PAIR_CURSOR) | italic
        if state.sel.selection.contains(row, col):
            return curses.color_pair(self.PAIR_SELECTED) | curses.A_BOLD | italic
        if is_formula:
            return curses.color_pair(self.PAIR_FORMULA) | italic
        pair = self.MARK_PAIRS.get(state.mark_at(row, col))
        if pair is None:
            return curses.A_NORMAL
        return curses.color_pair(pair)

    def draw(self, win):
        win.erase()
        h, w = win.getmaxyx()
        num_rows, num_cols = self.layout(win)
        row_off, col_off = self.state.sel.scroll

        # header row
        x = ROW_NUMBER_WIDTH
        for c in range(num_cols):
            col = col_off + 1 + c
            cw = self.state.column_width(col)
            try:
                win.addnstr(0, x, get_column_letter(col).ljust(cw), max(0, min(cw, w - x - 1)), curses.A_BOLD)
            except (curses.error, ValueError):
                pass
            x += cw + 1

        for r in range(num_rows):
            y = 1 + r
            if y >= h:
                break
            row = row_off + 1 + r
            try:
                win.addnstr(y, 0, f"{row:>5}", ROW_NUMBER_WIDTH - 1, curses.A_BOLD)
            except curses.error:
                pass
            x = ROW_NUMBER_WIDTH
            for c in range(num_cols):
                col = col_off + 1 + c
                cw = self.state.column_width(col)
                avail = w - x - 1
                if avail <= 0:
                    break
                text = self.state.cell_display(row, col).ljust(cw)
                try:
                    win.addnstr(y, x, text, min(cw, avail), self.cell_attr(row, col))
                except curses.error:
                    pass
                x += cw + 1

        win.refresh()
