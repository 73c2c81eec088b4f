"""Append bond applications to the fixed-layout submissions sheet."""

import logging
from collections.abc import Mapping
from datetime import datetime

from openpyxl.worksheet.worksheet import Worksheet

from bond_intake.models import BondApplication, CellValue, SubmissionResult
from bond_intake.schemas import APPLICATIONS_SHEET, SUBMISSION_COLUMNS, SUBMISSION_HEADERS
from bond_intake.store.workbook import WorkbookStore

logger = logging.getLogger(__name__)


def ensure_schema(store: WorkbookStore, table_name: str = APPLICATIONS_SHEET) -> Worksheet:
    """Return the submissions sheet, creating it on first use.

    A new sheet gets the full header row in one write, bold, with row 1
    frozen. An existing sheet is returned as is.
    """
    if store.has_table(table_name):
        return store.get_table(table_name)

    logger.info("Creating %s sheet", table_name)
    table = store.create_table(table_name, SUBMISSION_HEADERS)
    store.bold_row(table, 1, len(SUBMISSION_HEADERS))
    store.freeze_header(table)
    return table


def submission_row(application: BondApplication, timestamp: datetime) -> list[CellValue]:
    """Lay out an application in submissions-sheet column order."""
    row: list[CellValue] = []
    for field in SUBMISSION_COLUMNS.values():
        if field is None:
            row.append(timestamp)
            continue
        value = getattr(application, field)
        row.append("" if value is None else value)
    return row


def append_submission(
    store: WorkbookStore,
    record: BondApplication | Mapping[str, CellValue],
    table_name: str = APPLICATIONS_SHEET,
    now: datetime | None = None,
) -> SubmissionResult:
    """Append one application after the last used row.

    No field is required; anything missing is written as an empty cell.
    """
    if not isinstance(record, BondApplication):
        record = BondApplication.model_validate(dict(record))

    table = ensure_schema(store, table_name)
    timestamp = now or datetime.now()
    row = store.append_row(table, submission_row(record, timestamp))

    logger.info("Appended application for booking %r at %s row %d",
                record.booking_number, table.title, row)
    return SubmissionResult(
        success=True,
        message="Application submitted successfully",
        timestamp=timestamp,
        row=row,
    )
