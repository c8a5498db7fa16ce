import curses

TITLE = "Select Sheet (W/S:Move, Enter:Select, Esc:Cancel)"
MAX_POPUP_HEIGHT = 15


class SheetPicker:
    """Highlighted candidate while the sheet list is open."""

    def __init__(self):
        self.index = 0

    def open(self, current_index: int):
        self.index = current_index

    def move(self, delta: int, count: int):
        if count <= 0:
            return
        self.index = (self.index + delta) % count

    @staticmethod
    def popup_rect(names, screen_h, screen_w):
        """(y, x, height, width) of the modal, centred on the screen."""
        longest = max((len(n) for n in names), default=10)
        width = max(longest + 6, 20, len(TITLE) + 4)
        height = min(len(names) + 2, MAX_POPUP_HEIGHT)
        width = min(width, screen_w)
        height = min(height, screen_h)
        y = max(0, (screen_h - height) // 2)
        x = max(0, (screen_w - width) // 2)
        return y, x, height, width

    def draw(self, stdscr, names, current_index):
        screen_h, screen_w = stdscr.getmaxyx()
        y, x, height, width = self.popup_rect(names, screen_h, screen_w)
        try:
            win = curses.newwin(height, width, y, x)
        except curses.error:
            return
        win.leaveok(True)
        win.erase()
        win.box()
        try:
            win.addnstr(0, 2, TITLE, max(0, width - 4))
        except curses.error:
            pass

        rows = max(0, height - 2)
        # keep the highlighted entry inside the visible window
        top = max(0, min(self.index - rows + 1, len(names) - rows)) if self.index >= rows else 0
        for i, name in enumerate(names[top : top + rows]):
            idx = top + i
            marker = "*" if idx == current_index else " "
            line = f"{marker} {name}".ljust(width - 2)
            attr = curses.A_REVERSE if idx == self.index else curses.A_NORMAL
            try:
                win.addnstr(1 + i, 1, line, width - 2, attr)
            except curses.error:
                pass
        win.refresh()
