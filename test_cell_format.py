import datetime as dt

import pytest

from cell_format import (
    DATE_PATTERN,
    DATETIME_PATTERN,
    PENDING_FORMULA,
    TIME_PATTERN,
    display_text,
    format_value,
    is_date_format,
    normalize_date_format,
    truncate,
)
from mark_codec import CellStyle
from xlsx_document import CellSnapshot


@pytest.mark.parametrize(
    "code, expected",
    [
        ("General", False),
        ("@", False),
        (None, False),
        ("0.00", False),
        ("#,##0", False),
        ("yyyy-mm-dd", True),
        ("m/d/yy", True),
        ("h:mm AM/PM", True),
        ("[$-409]mmmm d, yyyy", True),
    ],
)
def test_is_date_format(code, expected):
    assert is_date_format(code) is expected


@pytest.mark.parametrize(
    "code, expected",
    [
        ("m/d/yyyy h:mm", DATETIME_PATTERN),
        ("dd.mm.yyyy hh:mm:ss", DATETIME_PATTERN),
        ("h:mm:ss", TIME_PATTERN),
        ("h:mm AM/PM", TIME_PATTERN),
        ("dd-mmm-yy", DATE_PATTERN),
        ("yyyy", DATE_PATTERN),
    ],
)
def test_normalize_date_format(code, expected):
    assert normalize_date_format(code) == expected


def test_dates_render_in_canonical_patterns():
    moment = dt.datetime(2024, 3, 5, 14, 7, 9)
    assert format_value(moment, "m/d/yy") == "2024-03-05"
    assert format_value(moment, "m/d/yy h:mm") == "2024-03-05 14:07:09"
    assert format_value(dt.time(14, 7, 9), "h:mm") == "14:07:09"
    assert format_value(dt.date(2024, 3, 5), "d-mmm") == "2024-03-05"


def test_serial_numbers_render_as_dates():
    assert format_value(45292, "mm/dd/yyyy") == "2024-01-01"
    assert format_value(45356, "d mmm yyyy") == "2024-03-05"
    assert format_value(45292.5, "yyyy-mm-dd h:mm") == "2024-01-01 12:00:00"


def test_non_date_text_under_date_format_is_left_alone():
    assert format_value("n/a", "yyyy-mm-dd") == "n/a"


@pytest.mark.parametrize(
    "value, code, expected",
    [
        (1234.5, "#,##0.00", "1,234.50"),
        (1234.5, "#,##0", "1,234"),
        (3, "0.00", "3.00"),
        (0.256, "0.0%", "25.6%"),
        (0.5, "0%", "50%"),
        ("abc", "0.00", "abc"),
        (7, '"$"#,##0', "$7"),
        (2.0, "General", "2"),
        (2.25, "General", "2.25"),
        ("=1+1", "@", "=1+1"),
        (True, None, "TRUE"),
        (None, "0.00", ""),
    ],
)
def test_format_value(value, code, expected):
    assert format_value(value, code) == expected


@pytest.mark.parametrize(
    "text, width, expected",
    [
        ("hello world", 5, "hell~"),
        ("abc", 3, "abc"),
        ("abcd", 1, "~"),
        ("abcd", 0, "~"),
        ("", 10, ""),
    ],
)
def test_truncate(text, width, expected):
    assert truncate(text, width) == expected


def test_display_formula_without_cached_result_shows_placeholder():
    cell = CellSnapshot(raw="=SUM(A1:A3)", formula="SUM(A1:A3)", cached_value=None)
    assert display_text(cell, 10) == PENDING_FORMULA


def test_display_formula_shows_cached_result_not_source():
    cell = CellSnapshot(raw="=A1*2", formula="A1*2", cached_value=84.0)
    assert display_text(cell, 10) == "84"


def test_display_applies_number_format_then_truncates():
    cell = CellSnapshot(raw=1234567.891, style=CellStyle(number_format="#,##0.00"))
    assert display_text(cell, 20) == "1,234,567.89"
    assert display_text(cell, 8) == "1,234,5~"


def test_display_empty_cell():
    assert display_text(CellSnapshot(), 10) == ""


@pytest.mark.parametrize(
    "value, code, expected",
    [
        (1234.5, "$#,##0.00", "$1,234.50"),
        (-1234.5, "$#,##0.00", "-$1,234.50"),
        (1234.5, "[$€-407]#,##0.00", "€1,234.50"),
        (12345, "0.0E+00", "1.2E+04"),
        (0.00012, "0.00E+00", "1.20E-04"),
        (0, "0.0E+00", "0.0E+00"),
        (1234, "#,##0_);(#,##0)", "1,234 "),
        (-1234, "#,##0_);(#,##0)", "(1,234)"),
        (2.5, '0.00" kg"', "2.50 kg"),
        (0, '0;-0;"zero"', "zero"),
        (-3, '0;-0;"zero"', "-3"),
        ("abc", '0.00;-0.00;0;"Text: "@', "Text: abc"),
        (1234567, "#,##0,", "1,235"),
        (0.5, "#.00", ".50"),
        (5, "000", "005"),
        (5, '"N="General', "N=5"),
        (1.25, "# ?/?", "1.25"),
    ],
)
def test_format_codes_beyond_plain_decimals(value, code, expected):
    assert format_value(value, code) == expected


@pytest.mark.parametrize("text", ["nan", "inf", "-inf", "NaN"])
def test_non_finite_text_is_shown_verbatim(text):
    assert format_value(text, "yyyy-mm-dd") == text
    assert format_value(text, "0.00") == text


def test_non_finite_number_under_date_format():
    assert format_value(float("nan"), "yyyy-mm-dd h:mm") == "nan"


def test_display_survives_nan_text_in_date_cell():
    cell = CellSnapshot(raw="nan", style=CellStyle(number_format="yyyy-mm-dd"))
    assert display_text(cell, 10) == "nan"
