ROW_NUMBER_WIDTH = 6
HEADER_ROWS = 1
MAX_VISIBLE_COLUMNS = 50


def visible_column_count(available_width: int, start_col: int, width_of) -> int:
    """Columns that fit from ``start_col``, each taking its width plus one separator."""
    count = 0
    used = 0
    while count < MAX_VISIBLE_COLUMNS:
        col_width = width_of(start_col + count) + 1
        if used + col_width > available_width:
            break
        used += col_width
        count += 1
    return max(1, count)


def visible_extent(available_width, available_height, start_col, width_of):
    """(rows, cols) of the grid body for a region of the given size.

    The sizes passed in are the inner grid area; the row-number gutter and
    the column header row are taken out here.
    """
    body_width = max(0, available_width - ROW_NUMBER_WIDTH)
    body_height = max(0, available_height - HEADER_ROWS)
    cols = visible_column_count(body_width, start_col, width_of)
    rows = max(1, body_height)
    return rows, cols
