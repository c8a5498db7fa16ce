import logging

import mark_codec
from cell_format import display_text
from clipboard import ClipboardBuffer
from column_widths import ColumnWidths
from mark_codec import Mark
from selection import SelectionModel
from xlsx_document import DocumentError

logger = logging.getLogger(__name__)


class AppState:
    """Everything one editing session owns besides the terminal."""

    def __init__(self, document, file_path=None, config=None):
        config = config or {}
        self.document = document
        self.file_path = file_path if file_path is not None else document.path

        self.current_sheet = 0
        self.sel = SelectionModel()
        self.column_widths = ColumnWidths(config.get("DEFAULT_COLUMN_WIDTH"))
        self.clipboard = ClipboardBuffer(config.get("CLIPBOARD_INTERFACE_COMMAND"))

        self.status_message: str | None = None
        self.should_quit = False

        # (sheet_index, row, col) -> Mark; absent means Mark.NONE
        self.marks: dict[tuple[int, int, int], Mark] = {}
        self.load_marks()

    # ---------- marks ----------
    def load_marks(self):
        self.marks = {}
        for sheet in range(self.document.sheet_count()):
            for row, col, style in self.document.iter_styled_cells(sheet):
                mark = mark_codec.decode(style)
                if mark is not Mark.NONE:
                    self.marks[(sheet, row, col)] = mark
        logger.debug("Loaded %d marked cell(s)", len(self.marks))

    def mark_at(self, row: int, col: int) -> Mark:
        return self.marks.get((self.current_sheet, row, col), Mark.NONE)

    def set_mark_for_selection(self, mark: Mark) -> int:
        sheet = self.current_sheet
        count = 0
        for row, col in self.sel.selection.cells():
            key = (sheet, row, col)
            if mark is Mark.NONE:
                self.marks.pop(key, None)
            else:
                self.marks[key] = mark
            style = self.document.style(sheet, row, col)
            self.document.set_style(sheet, row, col, mark_codec.encode(mark, style))
            count += 1
        self.status_message = f"Marked {count} cell(s): {mark_codec.label(mark)}"
        return count

    # ---------- cells ----------
    def column_width(self, col: int) -> int:
        return self.column_widths.get(col)

    def cell_display(self, row: int, col: int) -> str:
        cell = self.document.cell(self.current_sheet, row, col)
        return display_text(cell, self.column_width(col))

    def is_formula_cell(self, row: int, col: int) -> bool:
        return self.document.is_formula(self.current_sheet, row, col)

    def current_cell(self):
        return self.document.cell(self.current_sheet, *self.sel.cursor)

    def write_current_cell(self, text: str):
        self.document.set_value(self.current_sheet, *self.sel.cursor, text)

    # ---------- clipboard ----------
    def copy_selection(self) -> int:
        count = self.clipboard.copy(self.document, self.current_sheet, self.sel.selection)
        if self.clipboard.export():
            self.status_message = f"Copied {count} cell(s)"
        else:
            self.status_message = f"Copied {count} cell(s) (system clipboard failed)"
        return count

    def paste_clipboard(self):
        pasted = self.clipboard.paste(self.document, self.current_sheet, self.sel.cursor)
        if pasted is None:
            self.status_message = "Clipboard is empty"
            return None
        rows, cols = pasted
        self.status_message = f"Pasted {rows}x{cols} cells"
        return pasted

    # ---------- columns ----------
    def widen_column(self):
        if self.column_widths.widen(self.sel.col):
            self.status_message = f"Column width at maximum ({ColumnWidths.MAX_WIDTH})"

    def shrink_column(self):
        if self.column_widths.shrink(self.sel.col):
            self.status_message = f"Column width at minimum ({ColumnWidths.MIN_WIDTH})"

    # ---------- navigation ----------
    def jump_to_end(self):
        sheet = self.current_sheet
        self.sel.jump_to_end(
            self.document.highest_row(sheet), self.document.highest_column(sheet)
        )

    def jump_to_row_end(self):
        self.sel.jump_to_row_end(self.document.highest_column(self.current_sheet))

    # ---------- sheets ----------
    def sheet_count(self) -> int:
        return self.document.sheet_count()

    def get_sheet_names(self) -> list[str]:
        return self.document.sheet_names()

    def get_active_sheet_name(self) -> str:
        return self.document.sheet_name(self.current_sheet)

    def set_active_sheet(self, index: int) -> bool:
        if not 0 <= index < self.sheet_count():
            return False
        self.current_sheet = index
        return True

    def switch_sheet(self, delta: int):
        count = self.sheet_count()
        if count == 0:
            return None
        self.current_sheet = (self.current_sheet + delta) % count
        return self.get_active_sheet_name()

    # ---------- persistence ----------
    def save(self) -> bool:
        try:
            self.document.save(self.file_path)
        except DocumentError as exc:
            self.status_message = f"Error: {exc}"
            return False
        self.status_message = f"Saved: {self.file_path}"
        return True
