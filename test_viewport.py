import pytest

from column_widths import ColumnWidths
from viewport import (
    MAX_VISIBLE_COLUMNS,
    ROW_NUMBER_WIDTH,
    visible_column_count,
    visible_extent,
)


def test_columns_accumulate_width_plus_separator():
    assert visible_column_count(33, 1, lambda _c: 10) == 3
    assert visible_column_count(32, 1, lambda _c: 10) == 2


def test_at_least_one_column_even_when_too_narrow():
    assert visible_column_count(5, 1, lambda _c: 10) == 1
    assert visible_column_count(0, 1, lambda _c: 10) == 1


def test_mixed_widths_from_scroll_offset():
    widths = {1: 20, 2: 3, 3: 3}
    count = visible_column_count(12, 2, lambda c: widths.get(c, 10))
    # columns 2 and 3 take 4 each; column 4 would need 11 more
    assert count == 2


def test_visible_column_cap():
    assert visible_column_count(10_000, 1, lambda _c: 0) == MAX_VISIBLE_COLUMNS


@pytest.mark.parametrize(
    "width, height, expected",
    [
        (ROW_NUMBER_WIDTH + 22, 10, (9, 2)),
        (ROW_NUMBER_WIDTH + 21, 10, (9, 1)),
        (0, 0, (1, 1)),
        (80, 1, (1, 6)),
    ],
)
def test_visible_extent(width, height, expected):
    widths = ColumnWidths()
    assert visible_extent(width, height, 1, widths.get) == expected
