"""Render a record as a Word document and export it to docx or PDF."""

import logging
import shutil
import subprocess
import tempfile
from datetime import date, datetime
from pathlib import Path

from docx import Document
from docx.document import Document as DocumentObject
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt

from bond_intake.errors import DocumentExportError
from bond_intake.models import CellValue

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("docx", "pdf")


def format_value(value: CellValue) -> str:
    """Cell value as display text. Midnight datetimes print as plain dates."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ", timespec="minutes")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def record_lines(headers: list[CellValue], row: list[CellValue]) -> list[str]:
    """``"<Header>: <Value>"`` for every column with a header and a value."""
    lines = []
    for header, value in zip(headers, row):
        label = "" if header is None else str(header).strip()
        text = format_value(value).strip()
        if label and text:
            lines.append(f"{label}: {text}")
    return lines


def add_rule(doc: DocumentObject) -> None:
    """Add an empty paragraph with a bottom border as a horizontal rule."""
    para = doc.add_paragraph()
    p_pr = para._p.get_or_add_pPr()
    borders = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "6")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), "auto")
    borders.append(bottom)
    p_pr.append(borders)


class DocumentSink:
    """Builds documents and writes them out in a requested format."""

    def __init__(self, font_name: str = "Calibri", font_size: int = 11):
        self.font_name = font_name
        self.font_size = font_size

    def render(self, title: str, lines: list[str]) -> DocumentObject:
        doc = Document()

        style = doc.styles["Normal"]
        style.font.name = self.font_name
        style.font.size = Pt(self.font_size)

        heading = doc.add_heading(title, level=1)
        heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
        add_rule(doc)

        for line in lines:
            label, sep, value = line.partition(": ")
            para = doc.add_paragraph()
            if sep:
                para.add_run(label + sep).bold = True
                para.add_run(value)
            else:
                para.add_run(line)
            para.paragraph_format.space_after = Pt(2)
        return doc

    def export(self, document: DocumentObject, fmt: str, path: str | Path) -> Path:
        """Write ``document`` to ``path`` as ``"docx"`` or ``"pdf"``.

        PDF conversion runs LibreOffice headless (``soffice``), which must
        be on the PATH.
        """
        fmt = fmt.lower()
        if fmt not in EXPORT_FORMATS:
            raise DocumentExportError(f"Unsupported export format: {fmt}")

        path = Path(path).with_suffix(f".{fmt}")
        path.parent.mkdir(parents=True, exist_ok=True)

        if fmt == "docx":
            document.save(str(path))
            logger.info("Wrote %s", path)
            return path

        soffice = shutil.which("soffice") or shutil.which("libreoffice")
        if soffice is None:
            raise DocumentExportError(
                "Unable to convert Word document to PDF. Install LibreOffice ('soffice')."
            )

        tmpdir = tempfile.mkdtemp(prefix="bond_intake_pdf_")
        try:
            docx_path = Path(tmpdir) / path.with_suffix(".docx").name
            document.save(str(docx_path))
            cmd = [soffice, "--headless", "--convert-to", "pdf", "--outdir", tmpdir, str(docx_path)]
            try:
                subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
            except (OSError, subprocess.CalledProcessError) as e:
                raise DocumentExportError(f"PDF conversion failed: {e}") from e

            out_pdf = docx_path.with_suffix(".pdf")
            if not out_pdf.exists():
                raise DocumentExportError(f"PDF conversion produced no output for {docx_path.name}")
            shutil.move(str(out_pdf), str(path))
        finally:
            shutil.rmtree(tmpdir, ignore_errors=True)

        logger.info("Wrote %s", path)
        return path


def render_record(
    headers: list[CellValue],
    row: list[CellValue],
    title: str = "Bond Application",
    sink: DocumentSink | None = None,
) -> DocumentObject:
    """Build a document with a centered title, a rule and one line per field."""
    sink = sink or DocumentSink()
    return sink.render(title, record_lines(headers, row))
