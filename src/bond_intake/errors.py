"""Error taxonomy for bond-intake operations.

Every failure surfaces to the caller as a single exception carrying a
human-readable message. Nothing is retried.
"""


class BondIntakeError(Exception):
    """Base class for all bond-intake failures."""


class TableNotFound(BondIntakeError):
    """The named table is absent and no fallback table was requested."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = available or []
        message = f"Sheet '{name}' not found"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class OutOfRange(BondIntakeError):
    """Row index outside the table's data rows."""

    def __init__(self, row_index: int, last_row: int, first_row: int = 2):
        self.row_index = row_index
        self.first_row = first_row
        self.last_row = last_row
        super().__init__(
            f"Invalid row index: {row_index}. Must be between {first_row} and {last_row}"
        )


class NoSelection(BondIntakeError):
    """An update was requested but no row has been selected."""


class RecordNotFound(BondIntakeError):
    """No data row matches the requested lookup."""


class UpstreamWriteFailure(BondIntakeError):
    """The row store rejected a write."""


class DocumentExportError(BondIntakeError):
    """A rendered document could not be exported."""
