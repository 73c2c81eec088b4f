"""Tests for writing form fields into fuzzily matched columns."""

from datetime import datetime

import pytest

from bond_intake.errors import OutOfRange, TableNotFound, UpstreamWriteFailure
from bond_intake.mapper import apply_fields
from bond_intake.schemas import FIELD_RULES, TIMESTAMP_RULE, FieldRule, resolve_column

NOW = datetime(2024, 3, 1, 9, 30)


def _row(store, row_index):
    sheet = store.get_table("Lee County Arrests")
    return store.read_range(sheet, row_index, 1, sheet.max_column)


def _rule(key):
    return next(rule for rule in FIELD_RULES if rule.key == key)


def test_bond_amount_lands_in_bail_amount_column(make_store):
    store = make_store(["Name", "Bail Amount"], ["Jane Doe", ""])
    assert apply_fields(store, 2, {"bondAmount": 5000}) is True
    assert _row(store, 2) == ["Jane Doe", 5000]


def test_unknown_field_is_ignored(make_store):
    store = make_store(["Name", "Bail Amount"], ["Jane Doe", 100])
    assert apply_fields(store, 2, {"unknownField": "x"}) is True
    assert _row(store, 2) == ["Jane Doe", 100]


def test_field_with_no_matching_header_is_ignored(make_store):
    store = make_store(["Name", "Bail Amount"], ["Jane Doe", 100])
    apply_fields(store, 2, {"email": "jane@example.com"})
    assert _row(store, 2) == ["Jane Doe", 100]


def test_match_is_case_insensitive_substring():
    assert resolve_column(["Booking", "Defendant Full Name"], _rule("defendantName")) == 2
    assert resolve_column(["id", "defendant phone number"], _rule("phone")) == 2
    assert resolve_column(["BOND_AMOUNT"], _rule("bondAmount")) == 1


def test_first_matching_header_wins(make_store):
    store = make_store(["Phone", "Cell Phone"], ["", ""])
    apply_fields(store, 2, {"phone": "555-0100"})
    assert _row(store, 2) == ["555-0100", ""]


def test_header_order_beats_candidate_order(make_store):
    # "Indemnitor Name" contains "name", so it is found before "Defendant Name".
    store = make_store(["Indemnitor Name", "Defendant Name"], ["", ""])
    apply_fields(store, 2, {"defendantName": "Jane Doe"})
    assert _row(store, 2) == ["Jane Doe", ""]


def test_timestamp_column_is_stamped(arrests_store):
    apply_fields(arrests_store, 3, {"phone": "555-9999"}, now=NOW)
    row = _row(arrests_store, 3)
    assert row[3] == "555-9999"
    assert row[5] == NOW


def test_timestamp_written_even_without_mapped_fields(arrests_store):
    apply_fields(arrests_store, 2, {}, now=NOW)
    assert _row(arrests_store, 2)[5] == NOW


def test_apply_fields_is_idempotent(arrests_store):
    submission = {"defendantName": "Janet Doe", "bondAmount": 7500, "dob": "1990-02-02"}
    apply_fields(arrests_store, 2, submission, now=NOW)
    first = _row(arrests_store, 2)
    apply_fields(arrests_store, 2, submission, now=NOW)
    assert _row(arrests_store, 2) == first
    assert first == ["B-100", "Janet Doe", "1990-02-02", "555-0100", 7500, NOW]


def test_other_rows_untouched(arrests_store):
    before = _row(arrests_store, 3)
    apply_fields(arrests_store, 2, {"bondAmount": 1}, now=NOW)
    assert _row(arrests_store, 3) == before


def test_custom_rules(make_store):
    store = make_store(["Alias"], [""])
    rules = (FieldRule("nickname", ("alias",)),)
    apply_fields(store, 2, {"nickname": "JD"}, rules=rules)
    assert _row(store, 2) == ["JD"]


@pytest.mark.parametrize("row_index", [1, 5])
def test_apply_fields_out_of_range(arrests_store, row_index):
    with pytest.raises(OutOfRange):
        apply_fields(arrests_store, row_index, {"phone": "1"})


def test_failed_write_keeps_earlier_fields(arrests_store):
    with pytest.raises(UpstreamWriteFailure):
        apply_fields(arrests_store, 2, {"phone": "555-1234", "bondAmount": object()}, now=NOW)
    row = _row(arrests_store, 2)
    assert row[3] == "555-1234"
    assert row[4] == 5000
    assert row[5] == ""


def test_timestamp_rule_candidates():
    assert resolve_column(["Name", "Updated At"], TIMESTAMP_RULE) == 2
    assert resolve_column(["Name", "Created"], TIMESTAMP_RULE) is None


def test_apply_fields_falls_back_to_active_sheet(make_store):
    store = make_store(["Name", "Bail Amount"], ["Jane Doe", ""], title="Sheet1")
    with pytest.raises(TableNotFound):
        apply_fields(store, 2, {"bondAmount": 5000})
    apply_fields(store, 2, {"bondAmount": 5000}, fallback_to_active=True)
    sheet = store.get_table("Sheet1")
    assert store.read_range(sheet, 2, 1, 2) == ["Jane Doe", 5000]
