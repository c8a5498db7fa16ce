import logging
import subprocess

import pandas as pd

from cell_format import plain_text
from selection import MAX_COLUMNS, MAX_ROWS

logger = logging.getLogger(__name__)


class ClipboardBuffer:
    """Rectangular snapshot of stored cell values, detached from the document.

    Values are kept as stored (numbers, dates, text), never as display text,
    so a paste writes back exactly what was copied.
    """

    def __init__(self, interface_command=None):
        self.data: tuple[tuple[object, ...], ...] = ()
        # argv that receives copied cells as TSV on stdin, e.g. ["wl-copy"]
        self.interface_command = interface_command

    def is_empty(self) -> bool:
        return not self.data

    @property
    def shape(self) -> tuple[int, int]:
        rows = len(self.data)
        cols = len(self.data[0]) if self.data else 0
        return rows, cols

    def copy(self, document, sheet: int, selection) -> int:
        min_row, min_col, max_row, max_col = selection.bounds()
        self.data = tuple(
            tuple(
                document.cell(sheet, r, c).value
                for c in range(min_col, max_col + 1)
            )
            for r in range(min_row, max_row + 1)
        )
        return (max_row - min_row + 1) * (max_col - min_col + 1)

    def paste(self, document, sheet: int, cursor) -> tuple[int, int] | None:
        """Write the snapshot with its top-left at ``cursor``.

        Cells that would land past the sheet limits are skipped.
        """
        if self.is_empty():
            return None
        start_row, start_col = cursor
        for dr, row_data in enumerate(self.data):
            target_row = start_row + dr
            if target_row > MAX_ROWS:
                break
            for dc, value in enumerate(row_data):
                target_col = start_col + dc
                if target_col > MAX_COLUMNS:
                    break
                document.set_raw(sheet, target_row, target_col, value)
        return self.shape

    def to_tsv(self) -> str:
        frame = pd.DataFrame([[plain_text(v) for v in row] for row in self.data])
        return frame.to_csv(sep="\t", index=False, header=False)

    def export(self) -> bool:
        """Mirror the snapshot to the system clipboard command, if one is configured."""
        if not self.interface_command or self.is_empty():
            return True
        try:
            subprocess.run(
                self.interface_command, input=self.to_tsv(), text=True, check=True
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("Clipboard command %s failed: %s", self.interface_command, exc)
            return False
        return True
