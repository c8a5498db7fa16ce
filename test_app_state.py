import openpyxl
import pytest
from openpyxl.styles import Font, PatternFill

from app_state import AppState
from mark_codec import UNMARKED_FONT, Mark
from selection import Selection
from xlsx_document import DocumentError, XlsxDocument


@pytest.fixture
def state(tmp_path):
    doc = XlsxDocument.open_or_create(str(tmp_path / "book.xlsx"))
    return AppState(doc)


def test_new_file_starts_at_origin(state):
    assert state.sel.cursor == (1, 1)
    assert state.current_sheet == 0
    assert state.marks == {}
    state.jump_to_end()
    assert state.sel.cursor == (1, 1)
    assert state.file_path.endswith("book.xlsx")


def test_mark_then_clear_leaves_no_residue(state):
    state.sel.selection = Selection((1, 1), (2, 2))

    assert state.set_mark_for_selection(Mark.YELLOW_BG) == 4
    assert state.mark_at(2, 2) is Mark.YELLOW_BG
    assert state.status_message == "Marked 4 cell(s): yellow bg"

    state.set_mark_for_selection(Mark.NONE)
    assert state.status_message == "Marked 4 cell(s): cleared"
    assert state.marks == {}
    for row, col in Selection((1, 1), (2, 2)).cells():
        style = state.document.style(0, row, col)
        assert style.fill_rgb is None
        assert style.font_rgb == UNMARKED_FONT
        assert state.mark_at(row, col) is Mark.NONE


def test_font_mark_over_background_keeps_fill(state):
    state.set_mark_for_selection(Mark.YELLOW_BG)
    state.set_mark_for_selection(Mark.RED_TEXT)
    style = state.document.style(0, 1, 1)
    assert style.fill_rgb == "FFFFEF00"
    assert style.font_rgb == "FFFF0001"
    # background wins when both are present
    state.load_marks()
    assert state.mark_at(1, 1) is Mark.YELLOW_BG


def test_marks_are_loaded_per_sheet_from_file(tmp_path):
    path = tmp_path / "colored.xlsx"
    wb = openpyxl.Workbook()
    first = wb.active
    first["B2"] = "x"
    first["B2"].fill = PatternFill(fill_type="solid", start_color="FFFF00", end_color="FFFF00")
    second = wb.create_sheet("Two")
    second["C3"] = "y"
    second["C3"].font = Font(color="FF00FF")
    wb.save(path)

    state = AppState(XlsxDocument.open_or_create(str(path)))
    assert state.marks == {(0, 2, 2): Mark.YELLOW_BG, (1, 3, 3): Mark.MAGENTA_TEXT}
    assert state.mark_at(3, 3) is Mark.NONE
    state.set_active_sheet(1)
    assert state.mark_at(3, 3) is Mark.MAGENTA_TEXT


def test_copy_and_paste_status_messages(state):
    state.paste_clipboard()
    assert state.status_message == "Clipboard is empty"

    state.write_current_cell("a")
    state.sel.selection = Selection((1, 1), (2, 3))
    assert state.copy_selection() == 6
    assert state.status_message == "Copied 6 cell(s)"

    state.sel.jump_to(5, 5)
    assert state.paste_clipboard() == (2, 3)
    assert state.status_message == "Pasted 2x3 cells"
    assert state.document.cell(0, 5, 5).value_text == "a"


def test_copy_reports_system_clipboard_failure(tmp_path):
    doc = XlsxDocument.open_or_create(str(tmp_path / "book.xlsx"))
    state = AppState(doc, config={"CLIPBOARD_INTERFACE_COMMAND": ["/nonexistent/clip-tool"]})
    state.copy_selection()
    assert state.status_message == "Copied 1 cell(s) (system clipboard failed)"
    assert not state.clipboard.is_empty()


def test_column_limits_report_status(state):
    for _ in range(25):
        state.widen_column()
    assert state.column_width(1) == 50
    assert state.status_message == "Column width at maximum (50)"

    state.status_message = None
    state.sel.jump_to(1, 2)
    for _ in range(4):
        state.shrink_column()
    assert state.column_width(2) == 3
    assert state.status_message == "Column width at minimum (3)"
    # the other column is untouched
    assert state.column_width(1) == 50


def test_configured_default_width(tmp_path):
    doc = XlsxDocument.open_or_create(str(tmp_path / "book.xlsx"))
    state = AppState(doc, config={"DEFAULT_COLUMN_WIDTH": 6})
    assert state.column_width(9) == 6


def test_cell_display_truncates_to_column_width(state):
    state.write_current_cell("abcdefghijklmnop")
    assert state.cell_display(1, 1) == "abcdefghi~"


def test_save_success_and_failure(state, tmp_path):
    state.write_current_cell("saved")
    assert state.save() is True
    assert state.status_message == f"Saved: {state.file_path}"

    state.file_path = str(tmp_path / "missing" / "book.xlsx")
    state.write_current_cell("changed")
    assert state.save() is False
    assert state.status_message.startswith("Error: ")
    assert state.document.cell(0, 1, 1).value_text == "changed"
    assert state.should_quit is False


def test_save_error_propagates_from_document(state, monkeypatch):
    def boom(path=None):
        raise DocumentError("disk full")

    monkeypatch.setattr(state.document, "save", boom)
    assert state.save() is False
    assert state.status_message == "Error: disk full"


def test_switch_sheet_cycles(state):
    state.document.workbook.create_sheet("B")
    state.document.workbook.create_sheet("C")

    assert state.switch_sheet(1) == "B"
    assert state.switch_sheet(1) == "C"
    assert state.switch_sheet(1) == "Sheet1"
    assert state.switch_sheet(-1) == "C"
    assert state.get_sheet_names() == ["Sheet1", "B", "C"]


def test_set_active_sheet_rejects_out_of_range(state):
    assert state.set_active_sheet(3) is False
    assert state.current_sheet == 0
    assert state.get_active_sheet_name() == "Sheet1"


def test_jump_to_end_uses_used_range(state):
    state.document.set_value(0, 12, 4, "x")
    state.jump_to_end()
    assert state.sel.cursor == (12, 4)
    state.sel.jump_to(3, 1)
    state.jump_to_row_end()
    assert state.sel.cursor == (3, 4)
