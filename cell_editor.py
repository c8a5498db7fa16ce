import curses


class CellEditor:
    """Single-line text buffer used while a cell is being edited."""

    def __init__(self):
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def start(self, text: str):
        self.buffer = text or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    def reset(self):
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def text(self) -> str:
        return self.buffer

    def autoscroll(self, width: int):
        width = max(1, width)
        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + width - 1:
            self.hscroll = self.cursor - (width - 1)
        max_scroll = max(0, len(self.buffer) - width + 1)
        self.hscroll = max(0, min(self.hscroll, max_scroll))

    def handle_key(self, ch) -> bool:
        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
            return True

        if ch == curses.KEY_DC:
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
            return True

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return True
        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return True
        if ch in (curses.KEY_HOME, 1):  # Ctrl+A
            self.cursor = 0
            return True
        if ch in (curses.KEY_END, 5):  # Ctrl+E
            self.cursor = len(self.buffer)
            return True

        if 32 <= ch <= 0x10FFFF and not (curses.KEY_MIN <= ch <= curses.KEY_MAX):
            try:
                ch_str = chr(ch)
            except ValueError:
                return False
            self.buffer = self.buffer[: self.cursor] + ch_str + self.buffer[self.cursor :]
            self.cursor += 1
            return True
        return False

    def draw(self, win, width=None):
        h, w = win.getmaxyx()
        title = " Editing (Enter:Save+Down, Tab:Save+Right, Esc:Cancel) "
        field_w = max(1, (width or w) - len(title) - 1)
        self.autoscroll(field_w)
        visible = self.buffer[self.hscroll : self.hscroll + field_w]
        try:
            win.addnstr(0, 0, title, w - 1, curses.A_BOLD)
            win.addnstr(0, len(title), visible.ljust(field_w), max(0, w - len(title) - 1))
        except curses.error:
            pass
        return len(title) + (self.cursor - self.hscroll)
