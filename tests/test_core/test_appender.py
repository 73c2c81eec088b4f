"""Tests for the fixed-layout bond application sheet."""

from datetime import datetime

import openpyxl
from openpyxl.styles import Font

from bond_intake.appender import append_submission, ensure_schema, submission_row
from bond_intake.models import BondApplication
from bond_intake.schemas import SUBMISSION_HEADERS
from bond_intake.store.workbook import WorkbookStore

NOW = datetime(2024, 3, 1, 9, 30)


def _empty_store():
    workbook = openpyxl.Workbook()
    workbook.active.title = "Lee County Arrests"
    return WorkbookStore(workbook)


def test_schema_has_28_columns():
    assert len(SUBMISSION_HEADERS) == 28
    assert SUBMISSION_HEADERS[0] == "Timestamp"
    assert SUBMISSION_HEADERS[1] == "Booking Number"
    assert SUBMISSION_HEADERS[-1] == "Additional Notes"


def test_ensure_schema_creates_bold_frozen_header():
    store = _empty_store()
    sheet = ensure_schema(store)

    assert sheet.title == "Bond Applications"
    assert store.read_range(sheet, 1, 1, 28) == SUBMISSION_HEADERS
    assert store.table_meta(sheet).last_col == 28
    assert store.table_meta(sheet).last_row == 1
    assert all(sheet.cell(row=1, column=col).font.bold for col in range(1, 29))
    assert sheet.freeze_panes == "A2"


def test_ensure_schema_reuses_existing_sheet():
    store = _empty_store()
    first = ensure_schema(store)
    append_submission(store, {"bookingNumber": "B-1"}, now=NOW)
    second = ensure_schema(store)
    assert first is second
    assert store.table_names().count("Bond Applications") == 1
    assert store.table_meta(second).last_row == 2


def test_append_submission_creates_table_then_appends():
    store = _empty_store()
    result = append_submission(
        store,
        {
            "bookingNumber": "B-100",
            "defendantFullName": "Jane Doe",
            "bondAmount": 5000,
            "indemnitorZip": "33901",
            "additionalNotes": "Call after 5pm",
        },
        now=NOW,
    )

    assert result.success is True
    assert result.message == "Application submitted successfully"
    assert result.timestamp == NOW
    assert result.row == 2

    sheet = store.get_table("Bond Applications")
    row = store.read_range(sheet, 2, 1, 28)
    assert row[0] == NOW
    assert row[SUBMISSION_HEADERS.index("Booking Number")] == "B-100"
    assert row[SUBMISSION_HEADERS.index("Defendant Full Name")] == "Jane Doe"
    assert row[SUBMISSION_HEADERS.index("Bond Amount")] == 5000
    assert row[SUBMISSION_HEADERS.index("Indemnitor ZIP")] == "33901"
    assert row[SUBMISSION_HEADERS.index("Additional Notes")] == "Call after 5pm"
    assert row[SUBMISSION_HEADERS.index("Court Date")] == ""


def test_append_submission_appends_after_last_row():
    store = _empty_store()
    append_submission(store, {"bookingNumber": "B-1"}, now=NOW)
    result = append_submission(store, {"bookingNumber": "B-2"}, now=NOW)
    assert result.row == 3
    sheet = store.get_table("Bond Applications")
    assert store.read_range(sheet, 3, 2, 1) == ["B-2"]


def test_append_submission_accepts_model_and_snake_case():
    store = _empty_store()
    application = BondApplication(booking_number="B-7", county="Lee")
    result = append_submission(store, application, now=NOW)
    row = store.read_range(store.get_table("Bond Applications"), result.row, 1, 28)
    assert row[SUBMISSION_HEADERS.index("County")] == "Lee"

    result = append_submission(store, {"case_number": "24-CF-1"}, now=NOW)
    row = store.read_range(store.get_table("Bond Applications"), result.row, 1, 28)
    assert row[SUBMISSION_HEADERS.index("Case Number")] == "24-CF-1"


def test_submission_row_fills_missing_fields_with_blanks():
    row = submission_row(BondApplication.model_validate({"unknownKey": "x"}), NOW)
    assert len(row) == 28
    assert row[0] == NOW
    assert row[1:] == [""] * 27


def test_submission_row_blanks_none():
    row = submission_row(BondApplication(charges=None), NOW)
    assert row[SUBMISSION_HEADERS.index("Charges")] == ""


def test_append_lands_below_data_not_below_formatting():
    store = _empty_store()
    sheet = ensure_schema(store)
    for row in range(2, 11):
        sheet.cell(row=row, column=1).font = Font(bold=True)
    result = append_submission(store, {"bookingNumber": "B-1"}, now=NOW)
    assert result.row == 2
    assert store.read_range(sheet, 2, 2, 1) == ["B-1"]
