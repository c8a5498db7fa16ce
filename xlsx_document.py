import logging
import math
import os
import re
import zipfile
from copy import copy
from dataclasses import dataclass, field

import openpyxl
from openpyxl.styles import PatternFill
from openpyxl.styles.colors import COLOR_INDEX, Color
from openpyxl.utils.exceptions import InvalidFileException

from cell_format import plain_text
from mark_codec import CellStyle

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".xlsx", ".xlsm", ".xltx", ".xltm"}

_NUMBER_TEXT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class DocumentError(Exception):
    """Opening or saving the workbook failed."""


@dataclass(frozen=True)
class CellSnapshot:
    raw: object = None
    formula: str = ""
    cached_value: object = None
    style: CellStyle = field(default_factory=CellStyle)

    @property
    def value(self):
        """Stored value; formula cells report their cached result."""
        if self.formula:
            return self.cached_value
        return self.raw

    @property
    def value_text(self) -> str:
        return plain_text(self.value)


def _color_argb(color) -> str | None:
    if color is None:
        return None
    kind = getattr(color, "type", None)
    if kind == "rgb":
        rgb = color.rgb
        return str(rgb).upper() if isinstance(rgb, str) and rgb else None
    if kind == "indexed":
        idx = color.indexed
        if isinstance(idx, int) and 0 <= idx < len(COLOR_INDEX):
            # palette entries carry a zero alpha
            return "FF" + COLOR_INDEX[idx][2:].upper()
    # theme colors carry no concrete value
    return None


def _coerce_text(text: str):
    stripped = text.strip()
    if stripped == "":
        return None
    upper = stripped.upper()
    if upper in ("TRUE", "FALSE"):
        return upper == "TRUE"
    match = _NUMBER_TEXT.match(stripped)
    if match is None:
        return text
    if "." not in stripped and match.group(3) is None:
        return int(stripped)
    number = float(stripped)
    # overflowing exponents would be written as an empty value
    return number if math.isfinite(number) else text


def _cell_map(ws):
    """(row, col) -> Cell for the cells that exist.

    Worksheet.cell() materialises empty cells, which would move the used range
    every time the grid is drawn, so reads go through the worksheet's own map.
    """
    return ws._cells


class XlsxDocument:
    DEFAULT_SHEET_NAME = "Sheet1"

    def __init__(self, workbook, path=None, cached_values=None):
        self.workbook = workbook
        self.path = path
        # (sheet_index, row, col) -> last result computed by the authoring app
        self._cached = dict(cached_values or {})

    # ---------- open / save ----------
    @classmethod
    def open_or_create(cls, path):
        _, ext = os.path.splitext(str(path))
        if ext.lower() not in SUPPORTED_EXTENSIONS:
            raise DocumentError("Unsupported file type (use .xlsx)")

        if not os.path.exists(path) or os.path.getsize(path) == 0:
            logger.info("Creating new workbook for %s", path)
            return cls.new(path)

        try:
            workbook = openpyxl.load_workbook(path)
            computed = openpyxl.load_workbook(path, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as exc:
            raise DocumentError(f"Failed to read file: {exc}") from exc

        cached = {}
        for idx, ws in enumerate(workbook.worksheets):
            computed_ws = computed.worksheets[idx]
            for (row, col), cell in _cell_map(ws).items():
                if cell.data_type != "f":
                    continue
                result = _cell_map(computed_ws).get((row, col))
                cached[(idx, row, col)] = result.value if result is not None else None
        logger.info(
            "Opened %s (%d sheet(s), %d formula cell(s))",
            path,
            len(workbook.worksheets),
            len(cached),
        )
        return cls(workbook, path, cached)

    @classmethod
    def new(cls, path=None):
        workbook = openpyxl.Workbook()
        workbook.active.title = cls.DEFAULT_SHEET_NAME
        return cls(workbook, path)

    def save(self, path=None):
        target = path or self.path
        if not target:
            raise DocumentError("No path to save to")
        try:
            self.workbook.save(target)
        except (OSError, ValueError, TypeError) as exc:
            logger.exception("Save to %s failed", target)
            raise DocumentError(f"Failed to save file: {exc}") from exc
        self.path = target
        logger.info("Saved %s", target)

    # ---------- sheets ----------
    def sheet_count(self) -> int:
        return len(self.workbook.worksheets)

    def sheet_names(self) -> list[str]:
        return [ws.title for ws in self.workbook.worksheets]

    def sheet_name(self, sheet: int) -> str:
        try:
            return self.workbook.worksheets[sheet].title
        except IndexError:
            return "???"

    def _sheet(self, sheet: int):
        return self.workbook.worksheets[sheet]

    def _existing(self, sheet: int, row: int, col: int):
        return _cell_map(self._sheet(sheet)).get((row, col))

    def highest_row(self, sheet: int) -> int:
        cells = _cell_map(self._sheet(sheet))
        return max((row for row, _ in cells), default=1)

    def highest_column(self, sheet: int) -> int:
        cells = _cell_map(self._sheet(sheet))
        return max((col for _, col in cells), default=1)

    # ---------- cells ----------
    def cell(self, sheet: int, row: int, col: int) -> CellSnapshot:
        cell = self._existing(sheet, row, col)
        if cell is None:
            return CellSnapshot()
        formula = ""
        cached = None
        value = cell.value
        if cell.data_type == "f":
            text = getattr(value, "text", value)
            formula = str(text or "").lstrip("=")
            cached = self._cached.get((sheet, row, col))
        return CellSnapshot(
            raw=value,
            formula=formula,
            cached_value=cached,
            style=self._style_of(cell),
        )

    def is_formula(self, sheet: int, row: int, col: int) -> bool:
        cell = self._existing(sheet, row, col)
        return cell is not None and cell.data_type == "f"

    def set_value(self, sheet: int, row: int, col: int, text: str) -> None:
        """Store typed text, reading numbers and TRUE/FALSE out of it."""
        self.set_raw(sheet, row, col, _coerce_text(text or ""))

    def set_raw(self, sheet: int, row: int, col: int, value) -> None:
        """Store ``value`` as is; any formula in the cell is replaced."""
        cell = self._sheet(sheet).cell(row=row, column=col)
        cell.value = value
        if isinstance(value, str) and value.startswith("="):
            # stored text is never compiled into a formula
            cell.data_type = "s"
        self._cached.pop((sheet, row, col), None)

    def style(self, sheet: int, row: int, col: int) -> CellStyle:
        cell = self._existing(sheet, row, col)
        if cell is None:
            return CellStyle()
        return self._style_of(cell)

    def set_style(self, sheet: int, row: int, col: int, style: CellStyle) -> None:
        cell = self._sheet(sheet).cell(row=row, column=col)
        if style.fill_rgb and style.fill_solid:
            cell.fill = PatternFill(
                fill_type="solid", start_color=style.fill_rgb, end_color=style.fill_rgb
            )
        elif style.clear_fill:
            cell.fill = PatternFill()

        font = copy(cell.font)
        font.color = Color(rgb=style.font_rgb) if style.font_rgb else None
        cell.font = font

        if style.number_format:
            cell.number_format = style.number_format

    def iter_styled_cells(self, sheet: int):
        for (row, col), cell in list(_cell_map(self._sheet(sheet)).items()):
            if cell.has_style:
                yield row, col, self._style_of(cell)

    @staticmethod
    def _style_of(cell) -> CellStyle:
        fill = cell.fill
        fill_rgb = None
        fill_solid = False
        if fill is not None and getattr(fill, "fill_type", None):
            fill_rgb = _color_argb(fill.fgColor)
            fill_solid = fill.fill_type == "solid"
        font = cell.font
        font_rgb = _color_argb(font.color) if font is not None else None
        return CellStyle(
            fill_rgb=fill_rgb,
            fill_solid=fill_solid,
            font_rgb=font_rgb,
            number_format=cell.number_format,
        )
