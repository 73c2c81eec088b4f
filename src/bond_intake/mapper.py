"""Write form fields into an existing record by fuzzy header matching.

A form posts keys such as ``bondAmount``; the sheet might call that column
"Bond_Amount" or "Bail Amount". Each key has an ordered :class:`FieldRule`.
Headers are scanned left to right and, for each header, the rule's
candidates in order. The first header that contains a candidate
(case-insensitive) receives the value; later headers are never checked.

Writes are not transactional. If a write fails part way, the fields
already written stay written.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

from bond_intake.models import CellValue
from bond_intake.reader import check_row_index
from bond_intake.schemas import (
    ARRESTS_SHEET,
    FIELD_RULES,
    TIMESTAMP_RULE,
    FieldRule,
    resolve_column,
)
from bond_intake.store.workbook import WorkbookStore

logger = logging.getLogger(__name__)


def apply_fields(
    store: WorkbookStore,
    row_index: int,
    submission: Mapping[str, CellValue],
    table_name: str = ARRESTS_SHEET,
    rules: Iterable[FieldRule] = FIELD_RULES,
    now: datetime | None = None,
    fallback_to_active: bool = False,
) -> bool:
    """Write submitted values into the matching columns of one row.

    Keys without a rule are ignored. After the fields, the first column
    matching the timestamp rule (if any) is set to ``now``.

    Raises
    ------
    TableNotFound
        If the sheet does not exist and ``fallback_to_active`` is false.
    OutOfRange
        If ``row_index`` is not a data row.
    UpstreamWriteFailure
        If the store rejects a write; earlier writes are kept.
    """
    table = store.get_table(table_name, fallback_to_active=fallback_to_active)
    meta = store.table_meta(table)
    check_row_index(row_index, meta.last_row)

    rules_by_key = {rule.key: rule for rule in rules}
    headers = store.read_headers(table)

    written = 0
    for key, value in submission.items():
        rule = rules_by_key.get(key)
        if rule is None:
            logger.debug("No column rule for field %r, skipping", key)
            continue
        col = resolve_column(headers, rule)
        if col is None:
            logger.debug("No header matches field %r, skipping", key)
            continue
        logger.debug("%s -> %r (column %d)", key, headers[col - 1], col)
        store.write_cell(table, row_index, col, value)
        written += 1

    col = resolve_column(headers, TIMESTAMP_RULE)
    if col is not None:
        store.write_cell(table, row_index, col, now or datetime.now())

    logger.info("Updated %d fields on %s row %d", written, table.title, row_index)
    return True
