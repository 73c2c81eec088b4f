"""Row store backed by an Excel workbook.

Tables are worksheets; row 1 holds the headers. Rows and columns are
1-based as in the spreadsheet itself. Empty cells read back as ``""``.
"""

import logging
from pathlib import Path

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils.exceptions import IllegalCharacterError
from openpyxl.worksheet.worksheet import Worksheet

from bond_intake.errors import TableNotFound, UpstreamWriteFailure
from bond_intake.models import CellValue, TableMeta

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".xlsx", ".xlsm", ".xltx", ".xltm")


class WorkbookStore:
    """Read and write rows of the worksheets in one workbook."""

    def __init__(self, workbook: openpyxl.Workbook, path: Path | None = None):
        self.workbook = workbook
        self.path = path

    @classmethod
    def open(cls, filepath: str | Path, create: bool = False) -> "WorkbookStore":
        """Load a workbook from disk.

        Parameters
        ----------
        filepath : str | Path
            Path to the workbook (.xlsx or .xlsm).
        create : bool
            Start an empty workbook when the file does not exist yet.

        Raises
        ------
        FileNotFoundError
            If the file is missing and ``create`` is false.
        ValueError
            If the file type is not a workbook openpyxl can write back.
        """
        path = Path(filepath).expanduser().resolve()
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise ValueError(f"Unsupported file type: {path.suffix}")
        if not path.exists():
            if not create:
                raise FileNotFoundError(f"Workbook not found: {filepath}")
            logger.info("Starting new workbook at %s", path)
            workbook = openpyxl.Workbook()
            # Drop the default "Sheet"; tables are created by name on demand.
            workbook.remove(workbook.active)
            return cls(workbook, path)

        keep_vba = path.suffix.lower() == ".xlsm"
        workbook = openpyxl.load_workbook(str(path), keep_vba=keep_vba)
        return cls(workbook, path)

    def save(self, filepath: str | Path | None = None) -> Path:
        """Write the workbook back to disk."""
        path = Path(filepath) if filepath is not None else self.path
        if path is None:
            raise ValueError("No path to save the workbook to")
        try:
            self.workbook.save(str(path))
        except (OSError, IndexError) as e:
            raise UpstreamWriteFailure(f"Could not save workbook {path}: {e}") from e
        logger.debug("Saved workbook %s", path)
        return path

    def table_names(self) -> list[str]:
        return list(self.workbook.sheetnames)

    def get_table(self, name: str, fallback_to_active: bool = False) -> Worksheet:
        """Look up a worksheet by name.

        With ``fallback_to_active`` a missing sheet resolves to the
        workbook's active sheet instead of failing.
        """
        if name in self.workbook.sheetnames:
            return self.workbook[name]
        if fallback_to_active and self.workbook.worksheets:
            sheet = self.workbook.active
            logger.warning("Sheet %r not found, using active sheet %r", name, sheet.title)
            return sheet
        raise TableNotFound(name, self.table_names())

    def has_table(self, name: str) -> bool:
        return name in self.workbook.sheetnames

    def create_table(self, name: str, header_row: list[str]) -> Worksheet:
        """Add a worksheet and write its header row in one pass."""
        sheet = self.workbook.create_sheet(title=name)
        for col, header in enumerate(header_row, start=1):
            self.write_cell(sheet, 1, col, header)
        return sheet

    def table_meta(self, table: Worksheet) -> TableMeta:
        """Extent of the cells holding a value.

        openpyxl's ``max_row``/``max_column`` also count cells that only
        carry formatting, so pre-formatted blank rows are skipped here.
        """
        last_row = last_col = 0
        for (row, col), cell in table._cells.items():
            if cell.value is None:
                continue
            last_row = max(last_row, row)
            last_col = max(last_col, col)
        return TableMeta(last_row=last_row, last_col=last_col)

    def read_range(self, table: Worksheet, row: int, col_start: int, col_count: int) -> list[CellValue]:
        """Read ``col_count`` cells of one row, starting at ``col_start``."""
        if col_count <= 0:
            return []
        cells = next(
            table.iter_rows(
                min_row=row,
                max_row=row,
                min_col=col_start,
                max_col=col_start + col_count - 1,
                values_only=True,
            )
        )
        return ["" if value is None else value for value in cells]

    def read_headers(self, table: Worksheet) -> list[CellValue]:
        return self.read_range(table, 1, 1, self.table_meta(table).last_col)

    def write_cell(self, table: Worksheet, row: int, col: int, value: CellValue) -> None:
        try:
            table.cell(row=row, column=col, value=value)
        except (ValueError, TypeError, IllegalCharacterError) as e:
            raise UpstreamWriteFailure(
                f"Write rejected at {table.title}!R{row}C{col}: {e}"
            ) from e

    def append_row(self, table: Worksheet, values: list[CellValue]) -> int:
        """Write ``values`` after the last used row and return that row."""
        row = self.table_meta(table).last_row + 1
        for col, value in enumerate(values, start=1):
            self.write_cell(table, row, col, value)
        return row

    def bold_row(self, table: Worksheet, row: int, col_count: int) -> None:
        for col in range(1, col_count + 1):
            table.cell(row=row, column=col).font = Font(bold=True)

    def freeze_header(self, table: Worksheet) -> None:
        table.freeze_panes = "A2"
