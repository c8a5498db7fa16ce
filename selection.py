from dataclasses import dataclass

from openpyxl.utils import get_column_letter

# Legacy .xls sheet limits (columns A..IV)
MAX_ROWS = 65536
MAX_COLUMNS = 256


def clamp_position(row: int, col: int) -> tuple[int, int]:
    return (
        max(1, min(MAX_ROWS, row)),
        max(1, min(MAX_COLUMNS, col)),
    )


def cell_ref(row: int, col: int) -> str:
    return f"{get_column_letter(col)}{row}"


@dataclass(frozen=True)
class Selection:
    """Anchored rectangle; ``start`` is the anchor, ``end`` follows the cursor."""

    start: tuple[int, int]
    end: tuple[int, int]

    @classmethod
    def single(cls, row: int, col: int) -> "Selection":
        return cls((row, col), (row, col))

    def bounds(self) -> tuple[int, int, int, int]:
        min_row = min(self.start[0], self.end[0])
        max_row = max(self.start[0], self.end[0])
        min_col = min(self.start[1], self.end[1])
        max_col = max(self.start[1], self.end[1])
        return min_row, min_col, max_row, max_col

    def contains(self, row: int, col: int) -> bool:
        min_row, min_col, max_row, max_col = self.bounds()
        return min_row <= row <= max_row and min_col <= col <= max_col

    def is_single(self) -> bool:
        return self.start == self.end

    def cells(self):
        min_row, min_col, max_row, max_col = self.bounds()
        for r in range(min_row, max_row + 1):
            for c in range(min_col, max_col + 1):
                yield r, c

    def size(self) -> tuple[int, int]:
        min_row, min_col, max_row, max_col = self.bounds()
        return max_row - min_row + 1, max_col - min_col + 1

    def ref(self) -> str:
        min_row, min_col, max_row, max_col = self.bounds()
        return f"{cell_ref(min_row, min_col)}:{cell_ref(max_row, max_col)}"


class SelectionModel:
    """Cursor, selection and scroll offset, all kept consistent on every move.

    ``viewport_size`` is (rows, cols) of the grid body as last laid out by the
    renderer; scroll adjustment reads it, so a redraw must precede the move
    it applies to.
    """

    def __init__(self, viewport_size=(20, 10)):
        self.cursor = (1, 1)
        self.selection = Selection.single(1, 1)
        self.scroll = (0, 0)
        self.viewport_size = viewport_size

    def move(self, dx: int, dy: int, extend: bool = False):
        row, col = self.cursor
        self.cursor = clamp_position(row + dy, col + dx)
        if extend:
            self.selection = Selection(self.selection.start, self.cursor)
        else:
            self.selection = Selection.single(*self.cursor)
        self.adjust_scroll()

    def adjust_scroll(self):
        row, col = self.cursor
        view_rows, view_cols = self.viewport_size
        row_off, col_off = self.scroll

        if row <= row_off:
            row_off = max(0, row - 1)
        elif row > row_off + view_rows:
            row_off = row - view_rows

        if col <= col_off:
            col_off = max(0, col - 1)
        elif col > col_off + view_cols:
            col_off = col - view_cols

        self.scroll = (row_off, col_off)

    def jump_to(self, row: int, col: int):
        self.cursor = clamp_position(row, col)
        self.selection = Selection.single(*self.cursor)
        self.adjust_scroll()

    def jump_to_start(self):
        self.cursor = (1, 1)
        self.selection = Selection.single(1, 1)
        self.scroll = (0, 0)

    def jump_to_end(self, max_row: int, max_col: int):
        self.jump_to(max(1, max_row), max(1, max_col))

    def jump_to_row_start(self):
        self.jump_to(self.cursor[0], 1)

    def jump_to_row_end(self, max_col: int):
        self.jump_to(self.cursor[0], max(1, max_col))

    def clear_selection(self):
        self.selection = Selection.single(*self.cursor)

    @property
    def row(self) -> int:
        return self.cursor[0]

    @property
    def col(self) -> int:
        return self.cursor[1]
