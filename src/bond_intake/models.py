"""Data models for bond applications and table metadata."""

from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field

CellValue = str | int | float | bool | datetime | date | time | None


def _form_field(alias: str, description: str):
    return Field(default="", alias=alias, description=description)


class BondApplication(BaseModel):
    """A submitted bond application.

    Accepts the camelCase keys posted by the intake form or the
    snake_case field names. Every field is optional; missing values are
    written as empty cells.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    booking_number: CellValue = _form_field("bookingNumber", "Jail booking number")
    defendant_full_name: CellValue = _form_field("defendantFullName", "Defendant full name")
    defendant_dob: CellValue = _form_field("defendantDOB", "Defendant date of birth")
    defendant_phone: CellValue = _form_field("defendantPhone", "Defendant phone")
    defendant_email: CellValue = _form_field("defendantEmail", "Defendant email")
    defendant_address: CellValue = _form_field("defendantAddress", "Defendant street address")
    defendant_city: CellValue = _form_field("defendantCity", "Defendant city")
    defendant_state: CellValue = _form_field("defendantState", "Defendant state")
    defendant_zip: CellValue = _form_field("defendantZip", "Defendant ZIP code")
    charges: CellValue = _form_field("charges", "Charges as booked")
    bond_amount: CellValue = _form_field("bondAmount", "Bond amount in dollars")
    bond_type: CellValue = _form_field("bondType", "Bond type (surety, cash, ...)")
    case_number: CellValue = _form_field("caseNumber", "Court case number")
    county: CellValue = _form_field("county", "Arresting county")
    court_date: CellValue = _form_field("courtDate", "Next court date")
    court_time: CellValue = _form_field("courtTime", "Next court time")
    court_location: CellValue = _form_field("courtLocation", "Courthouse / courtroom")
    indemnitor_name: CellValue = _form_field("indemnitorName", "Indemnitor (cosigner) name")
    indemnitor_relationship: CellValue = _form_field(
        "indemnitorRelationship", "Indemnitor relationship to defendant"
    )
    indemnitor_phone: CellValue = _form_field("indemnitorPhone", "Indemnitor phone")
    indemnitor_email: CellValue = _form_field("indemnitorEmail", "Indemnitor email")
    indemnitor_address: CellValue = _form_field("indemnitorAddress", "Indemnitor street address")
    indemnitor_city: CellValue = _form_field("indemnitorCity", "Indemnitor city")
    indemnitor_state: CellValue = _form_field("indemnitorState", "Indemnitor state")
    indemnitor_zip: CellValue = _form_field("indemnitorZip", "Indemnitor ZIP code")
    indemnitor_employer: CellValue = _form_field("indemnitorEmployer", "Indemnitor employer")
    additional_notes: CellValue = _form_field("additionalNotes", "Free-text notes")


class SubmissionResult(BaseModel):
    """Outcome of appending a bond application."""

    success: bool
    message: str
    timestamp: datetime
    row: int = Field(ge=2, description="Physical row the store assigned")


class TableMeta(BaseModel):
    """Used extent of a table."""

    last_row: int = Field(ge=0)
    last_col: int = Field(ge=0)


class TableStructure(BaseModel):
    """Sheet layout summary used when debugging header drift."""

    name: str
    last_row: int
    last_col: int
    headers: list[CellValue]
