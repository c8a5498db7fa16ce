from dataclasses import dataclass, replace
from enum import Enum


class Mark(Enum):
    NONE = 1
    YELLOW_BG = 2
    RED_TEXT = 3
    GREEN_TEXT = 4
    BLUE_BG = 5
    MAGENTA_TEXT = 6


@dataclass(frozen=True)
class CellStyle:
    """Owned copy of the parts of a cell style that marks touch.

    Colors are upper-case ARGB strings (or None when unset or not an RGB
    color). ``clear_fill`` asks the writer to drop whatever fill the cell has.
    """

    fill_rgb: str | None = None
    fill_solid: bool = False
    font_rgb: str | None = None
    number_format: str | None = None
    clear_fill: bool = False


# Writers collapse exact palette colors into indexed references that do not
# round-trip, so every written color is one unit off the palette entry.
UNMARKED_FONT = "FF000001"

_ENCODE = {
    Mark.NONE: {"fill": None, "font": UNMARKED_FONT},
    Mark.YELLOW_BG: {"fill": "FFFFEF00", "font": UNMARKED_FONT},
    Mark.RED_TEXT: {"font": "FFFF0001"},
    Mark.GREEN_TEXT: {"font": "FF008001"},
    Mark.BLUE_BG: {"fill": "FF0000FE", "font": "FFFFFFFE"},
    Mark.MAGENTA_TEXT: {"font": "FFFF00FE"},
}

_BACKGROUND_MARKS = {
    "FFFFFF00": Mark.YELLOW_BG,
    "FFFF00": Mark.YELLOW_BG,
    "FFFFEF00": Mark.YELLOW_BG,
    "FF0000FF": Mark.BLUE_BG,
    "0000FF": Mark.BLUE_BG,
    "FF0000FE": Mark.BLUE_BG,
    "FF00BFFF": Mark.BLUE_BG,
    "00BFFF": Mark.BLUE_BG,
}

_FONT_MARKS = {
    "FFFF0000": Mark.RED_TEXT,
    "FF0000": Mark.RED_TEXT,
    "FFFF0001": Mark.RED_TEXT,
    "FF008000": Mark.GREEN_TEXT,
    "008000": Mark.GREEN_TEXT,
    "FF008001": Mark.GREEN_TEXT,
    "FF00FF00": Mark.GREEN_TEXT,
    "00FF00": Mark.GREEN_TEXT,
    "FFFF00FF": Mark.MAGENTA_TEXT,
    "FF00FF": Mark.MAGENTA_TEXT,
    "FFFF00FE": Mark.MAGENTA_TEXT,
}

_LABELS = {
    Mark.NONE: "cleared",
    Mark.YELLOW_BG: "yellow bg",
    Mark.RED_TEXT: "red text",
    Mark.GREEN_TEXT: "green text",
    Mark.BLUE_BG: "blue bg",
    Mark.MAGENTA_TEXT: "magenta text",
}


def _normalize(argb) -> str:
    if not argb:
        return ""
    value = str(argb).strip().lstrip("#").upper()
    # a zero alpha means "no alpha given", as openpyxl stores six-digit hex
    if len(value) == 8 and value.startswith("00"):
        return value[2:]
    return value


def encode(mark: Mark, style: CellStyle | None = None) -> CellStyle:
    """Return ``style`` with the colors for ``mark`` applied.

    Marks that only color the font keep whatever fill the cell already had.
    ``Mark.NONE`` drops the fill pattern and resets the font color.
    """
    base = style if style is not None else CellStyle()
    entry = _ENCODE[mark]
    changes = {"font_rgb": entry["font"], "clear_fill": False}
    if "fill" in entry:
        fill = entry["fill"]
        changes["fill_rgb"] = fill
        changes["fill_solid"] = fill is not None
        changes["clear_fill"] = fill is None
    return replace(base, **changes)


def bg_mark(argb) -> Mark:
    return _BACKGROUND_MARKS.get(_normalize(argb), Mark.NONE)


def font_mark(argb) -> Mark:
    return _FONT_MARKS.get(_normalize(argb), Mark.NONE)


def decode(style: CellStyle | None) -> Mark:
    if style is None:
        return Mark.NONE
    if style.fill_rgb:
        mark = bg_mark(style.fill_rgb)
        if mark is not Mark.NONE:
            return mark
    if style.font_rgb:
        return font_mark(style.font_rgb)
    return Mark.NONE


def label(mark: Mark) -> str:
    return _LABELS[mark]


def mark_for_key(digit: str) -> Mark | None:
    """Map the ``1``..``6`` mark keys onto their marks."""
    if len(digit) != 1 or not digit.isdigit():
        return None
    try:
        return Mark(int(digit))
    except ValueError:
        return None
