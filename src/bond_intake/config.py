"""Runtime settings, read from ``BOND_INTAKE_*`` environment variables or ``.env``."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bond_intake.schemas import APPLICATIONS_SHEET, ARRESTS_SHEET


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOND_INTAKE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    workbook_path: Path = Field(
        default=Path("bond_intake.xlsx"),
        description="Workbook holding the arrests and applications sheets",
    )
    arrests_sheet: str = Field(default=ARRESTS_SHEET)
    applications_sheet: str = Field(default=APPLICATIONS_SHEET)
    fallback_to_active_sheet: bool = Field(
        default=True,
        description="Read the active sheet when the arrests sheet is missing",
    )
    selection_path: Path = Field(
        default=Path.home() / ".bond_intake" / "selection.json",
        description="Where the selected row is remembered between calls",
    )
    output_dir: Path = Field(default=Path("output"))
    document_title: str = Field(default="Bond Application")
    log_level: str = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    return Settings()
