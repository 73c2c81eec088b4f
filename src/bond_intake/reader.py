"""Read arrest records out of a worksheet as header-keyed mappings."""

import logging

from bond_intake.errors import OutOfRange, RecordNotFound
from bond_intake.models import CellValue, TableStructure
from bond_intake.schemas import ARRESTS_SHEET, FIELD_RULES, resolve_column
from bond_intake.store.workbook import WorkbookStore

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2


def check_row_index(row_index: int, last_row: int) -> None:
    """Raise OutOfRange unless ``row_index`` is a data row."""
    if row_index < FIRST_DATA_ROW or row_index > last_row:
        raise OutOfRange(row_index, last_row, FIRST_DATA_ROW)


def build_record(headers: list[CellValue], row: list[CellValue]) -> dict[str, CellValue]:
    """Pair each non-blank header with the value in the same column.

    Columns with a blank header are skipped. When a header repeats, the
    right-most column wins.
    """
    record: dict[str, CellValue] = {}
    for header, value in zip(headers, row):
        if header is None or str(header).strip() == "":
            continue
        record[str(header)] = value
    return record


def read_record(
    store: WorkbookStore,
    row_index: int,
    table_name: str = ARRESTS_SHEET,
    fallback_to_active: bool = False,
) -> dict[str, CellValue]:
    """Load one data row keyed by the table's header labels.

    Parameters
    ----------
    store : WorkbookStore
        Workbook holding the table.
    row_index : int
        1-based sheet row; must lie in ``[2, last_row]``.
    table_name : str
        Sheet to read.
    fallback_to_active : bool
        Read the active sheet when ``table_name`` does not exist.

    Formula cells come back as their formula text (``"=TODAY()-C2"``),
    not the computed value: the workbook is loaded with formulas kept so
    it can be saved back without losing them.

    Raises
    ------
    TableNotFound
        If the sheet is missing and no fallback was requested.
    OutOfRange
        If ``row_index`` is not a data row.
    """
    table = store.get_table(table_name, fallback_to_active=fallback_to_active)
    meta = store.table_meta(table)
    logger.debug("Reading %s row %d (last row %d, last col %d)",
                 table.title, row_index, meta.last_row, meta.last_col)

    check_row_index(row_index, meta.last_row)

    headers = store.read_range(table, 1, 1, meta.last_col)
    row = store.read_range(table, row_index, 1, meta.last_col)
    record = build_record(headers, row)

    logger.info("Mapped %d fields from %s row %d", len(record), table.title, row_index)
    return record


def find_row(
    store: WorkbookStore,
    booking_number,
    table_name: str = ARRESTS_SHEET,
    fallback_to_active: bool = False,
) -> int:
    """Return the first data row whose booking number equals ``booking_number``.

    The booking-number column is resolved with the same header rules used
    for updates. Values are compared as trimmed strings so ``1013788``
    matches ``"1013788"``.
    """
    rule = next(r for r in FIELD_RULES if r.key == "bookingNumber")
    table = store.get_table(table_name, fallback_to_active=fallback_to_active)
    meta = store.table_meta(table)
    col = resolve_column(store.read_headers(table), rule)
    if col is None:
        raise RecordNotFound(f"No booking number column in sheet '{table.title}'")

    wanted = str(booking_number).strip()
    for row_index in range(FIRST_DATA_ROW, meta.last_row + 1):
        value = store.read_range(table, row_index, col, 1)[0]
        if str(value).strip() == wanted:
            return row_index
    raise RecordNotFound(f"Booking number {wanted} not found in sheet '{table.title}'")


def describe_table(
    store: WorkbookStore,
    table_name: str = ARRESTS_SHEET,
    fallback_to_active: bool = False,
) -> TableStructure:
    """Summarise a sheet's extent and headers."""
    table = store.get_table(table_name, fallback_to_active=fallback_to_active)
    meta = store.table_meta(table)
    return TableStructure(
        name=table.title,
        last_row=meta.last_row,
        last_col=meta.last_col,
        headers=store.read_headers(table),
    )
