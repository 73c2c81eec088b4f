"""Shared fixtures: small in-memory arrest workbooks."""

import openpyxl
import pytest

from bond_intake.schemas import ARRESTS_SHEET
from bond_intake.store.workbook import WorkbookStore


def _make_store(headers, *rows, title=ARRESTS_SHEET):
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = title
    sheet.append(headers)
    for row in rows:
        sheet.append(row)
    return WorkbookStore(workbook)


@pytest.fixture
def make_store():
    return _make_store


@pytest.fixture
def arrests_store():
    return _make_store(
        ["Booking_Number", "Full_Name", "DOB", "Phone", "Bond_Amount", "Last Updated"],
        ["B-100", "Jane Doe", "1990-01-01", "555-0100", 5000, None],
        ["B-101", "John Roe", "1985-06-15", "555-0101", 2500, None],
        ["B-102", "Ann Poe", "1979-12-31", "", 1000, None],
    )
