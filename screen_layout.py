import curses


class ScreenLayout:
    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: header (1 line), grid (main), status bar (1 line)
        self.header_h = 1
        self.status_h = 1

        self.table_h = max(1, self.H - self.header_h - self.status_h)

        self.header_win = curses.newwin(self.header_h, self.W, 0, 0)
        self.header_win.leaveok(True)

        self.table_win = curses.newwin(self.table_h, self.W, self.header_h, 0)
        # grid pane must never own cursor
        self.table_win.leaveok(True)

        # status bar doubles as the edit line, so it may own the cursor
        self.status_win = curses.newwin(
            self.status_h, self.W, self.header_h + self.table_h, 0
        )
