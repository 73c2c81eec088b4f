"""Key-value store for the row a two-step front end is editing.

Selection is process-wide and single-tenant: a second user selecting a
row replaces the first user's selection. Operations that can take the row
index explicitly should.
"""

import json
import logging
from pathlib import Path

from bond_intake.errors import NoSelection

logger = logging.getLogger(__name__)

# Key under which the row being edited is kept.
SELECTED_ROW_KEY = "selectedRow"


class MemorySelectionStore:
    def __init__(self):
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)


class JsonSelectionStore:
    """Selection store persisted as a flat JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = str(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values, indent=2), encoding="utf-8")


def select_row(selection, row_index: int) -> None:
    selection.set(SELECTED_ROW_KEY, str(row_index))
    logger.info("Selected row %d", row_index)


def selected_row(selection) -> int:
    """Return the stored row index.

    Raises
    ------
    NoSelection
        If nothing is selected or the stored value is not a row number.
    """
    value = selection.get(SELECTED_ROW_KEY)
    if value is None or not str(value).strip():
        raise NoSelection("No row selected. Select a record before updating it.")
    try:
        return int(value)
    except ValueError as e:
        raise NoSelection(f"Stored selection is not a row number: {value!r}") from e
