class ColumnWidths:
    """Per-column display widths; only columns that differ from the default are stored.

    A column shrunk all the way down leaves the map but keeps rendering at the
    minimum width.
    """

    DEFAULT_WIDTH = 10
    STEP = 2
    MIN_WIDTH = 3
    MAX_WIDTH = 50

    def __init__(self, default_width: int | None = None):
        width = self.DEFAULT_WIDTH if default_width is None else default_width
        self.default_width = max(self.MIN_WIDTH, min(self.MAX_WIDTH, width))
        self.widths: dict[int, int] = {}
        self._at_minimum: set[int] = set()

    def get(self, col: int) -> int:
        if col in self.widths:
            return self.widths[col]
        if col in self._at_minimum:
            return self.MIN_WIDTH
        return self.default_width

    def widen(self, col: int) -> bool:
        """Grow ``col`` by one step; returns True when the maximum is reached."""
        new_width = min(self.get(col) + self.STEP, self.MAX_WIDTH)
        self._at_minimum.discard(col)
        self.widths[col] = new_width
        return new_width >= self.MAX_WIDTH

    def shrink(self, col: int) -> bool:
        """Shrink ``col`` by one step; returns True when the minimum is reached.

        Reaching the minimum drops the map entry.
        """
        new_width = max(self.get(col) - self.STEP, self.MIN_WIDTH)
        if new_width <= self.MIN_WIDTH:
            self.widths.pop(col, None)
            self._at_minimum.add(col)
            return True
        self.widths[col] = new_width
        return False

    def __contains__(self, col):
        return col in self.widths

    def __len__(self):
        return len(self.widths)
