"""Sheet layouts and header-matching rules.

The arrests sheet is maintained by hand and its headers drift
("Bond_Amount", "Bail Amount", "BOND"), so updates resolve form fields to
columns through ordered substring rules. The submissions sheet is ours and
uses a fixed column order.
"""

from dataclasses import dataclass

ARRESTS_SHEET = "Lee County Arrests"
APPLICATIONS_SHEET = "Bond Applications"

# Submissions sheet: header label → BondApplication field name.
# Order is the physical column order. Timestamp is filled at write time.
SUBMISSION_COLUMNS = {
    "Timestamp": None,
    "Booking Number": "booking_number",
    "Defendant Full Name": "defendant_full_name",
    "Defendant DOB": "defendant_dob",
    "Defendant Phone": "defendant_phone",
    "Defendant Email": "defendant_email",
    "Defendant Address": "defendant_address",
    "Defendant City": "defendant_city",
    "Defendant State": "defendant_state",
    "Defendant ZIP": "defendant_zip",
    "Charges": "charges",
    "Bond Amount": "bond_amount",
    "Bond Type": "bond_type",
    "Case Number": "case_number",
    "County": "county",
    "Court Date": "court_date",
    "Court Time": "court_time",
    "Court Location": "court_location",
    "Indemnitor Name": "indemnitor_name",
    "Indemnitor Relationship": "indemnitor_relationship",
    "Indemnitor Phone": "indemnitor_phone",
    "Indemnitor Email": "indemnitor_email",
    "Indemnitor Address": "indemnitor_address",
    "Indemnitor City": "indemnitor_city",
    "Indemnitor State": "indemnitor_state",
    "Indemnitor ZIP": "indemnitor_zip",
    "Indemnitor Employer": "indemnitor_employer",
    "Additional Notes": "additional_notes",
}

SUBMISSION_HEADERS = list(SUBMISSION_COLUMNS)


@dataclass(frozen=True)
class FieldRule:
    """A form field key and the header substrings that identify its column.

    Candidates are tried in order against each header, headers left to
    right; the first header containing any candidate (case-insensitive)
    wins.
    """

    key: str
    candidates: tuple[str, ...]

    def match(self, header) -> str | None:
        """Return the first candidate contained in ``header``, if any."""
        text = str(header).lower() if header is not None else ""
        for candidate in self.candidates:
            if candidate.lower() in text:
                return candidate
        return None


FIELD_RULES = (
    FieldRule("defendantName", ("Defendant Name", "Name", "Defendant", "Full Name")),
    FieldRule("dob", ("DOB", "Date of Birth", "Birth Date", "Birthdate")),
    FieldRule("phone", ("Phone", "Phone Number", "Telephone", "Cell", "Mobile")),
    FieldRule("email", ("Email", "E-mail", "Mail")),
    FieldRule("address", ("Address", "Street", "Location", "Residence")),
    FieldRule("arrestDate", ("Arrest Date", "Date of Arrest", "Arrested")),
    FieldRule("bookingNumber", ("Booking Number", "Booking #", "Booking", "Book Number")),
    FieldRule("charges", ("Charges", "Charge", "Offense", "Crime")),
    FieldRule("bondAmount", ("Bond Amount", "Bond", "Bail", "Bail Amount")),
    FieldRule("courtDate", ("Court Date", "Hearing Date", "Court", "Hearing")),
    FieldRule("indemnitorName", ("Indemnitor Name", "Indemnitor", "Cosigner")),
    FieldRule("relationship", ("Relationship", "Relation")),
    FieldRule("indemnitorPhone", ("Indemnitor Phone", "Cosigner Phone")),
    FieldRule("indemnitorEmail", ("Indemnitor Email", "Cosigner Email")),
    FieldRule("notes", ("Notes", "Comments", "Additional Info", "Remarks")),
)

TIMESTAMP_RULE = FieldRule("lastUpdated", ("Last Updated", "Updated", "Timestamp"))


def resolve_column(headers, rule: FieldRule) -> int | None:
    """Return the 1-based column of the first header matching ``rule``."""
    for col, header in enumerate(headers, start=1):
        if rule.match(header) is not None:
            return col
    return None