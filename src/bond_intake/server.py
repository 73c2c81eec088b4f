#!/usr/bin/env python3
"""
Bond Intake MCP Server
======================
An MCP server that lets an assistant or intake form work with the arrests
workbook:
- Inspect the arrests sheet layout
- Read an arrest record by row or booking number
- Select a row and update it from form fields
- Submit a bond application
- Render a record as a Word or PDF document
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from bond_intake.appender import append_submission
from bond_intake.config import get_settings
from bond_intake.errors import BondIntakeError
from bond_intake.mapper import apply_fields
from bond_intake.reader import check_row_index, describe_table, find_row, read_record
from bond_intake.render import DocumentSink, render_record
from bond_intake.store.selection import JsonSelectionStore, select_row, selected_row
from bond_intake.store.workbook import WorkbookStore

logger = logging.getLogger(__name__)

server = Server("bond-intake")


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _json(payload: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(payload, indent=2, default=str))]


def _error(message: str) -> list[TextContent]:
    return [TextContent(type="text", text=f"Error: {message}")]


def _open_store(arguments: dict[str, Any], create: bool = False) -> WorkbookStore:
    filepath = arguments.get("filepath") or get_settings().workbook_path
    return WorkbookStore.open(filepath, create=create)


def _resolve_row(store: WorkbookStore, arguments: dict[str, Any]) -> int:
    """Row from ``row_index``, else ``booking_number``, else the stored selection."""
    settings = get_settings()
    if arguments.get("row_index") is not None:
        return int(arguments["row_index"])
    if arguments.get("booking_number"):
        return find_row(
            store,
            arguments["booking_number"],
            settings.arrests_sheet,
            fallback_to_active=settings.fallback_to_active_sheet,
        )
    return selected_row(JsonSelectionStore(settings.selection_path))


_FILEPATH = {
    "type": "string",
    "description": "Path to the workbook (.xlsx); defaults to the configured workbook",
}
_ROW_INDEX = {
    "type": "integer",
    "minimum": 2,
    "description": "1-based sheet row of the arrest record",
}
_BOOKING_NUMBER = {
    "type": "string",
    "description": "Booking number to look the row up by",
}


# =============================================================================
# MCP TOOLS
# =============================================================================

@server.list_tools()
async def list_tools() -> list[Tool]:
    """List the bond intake tools."""
    return [
        Tool(
            name="describe_sheet",
            description="Show the arrests sheet's extent and header labels",
            inputSchema={
                "type": "object",
                "properties": {"filepath": _FILEPATH},
            },
        ),
        Tool(
            name="read_record",
            description="Read one arrest record as a header-keyed object",
            inputSchema={
                "type": "object",
                "properties": {
                    "filepath": _FILEPATH,
                    "row_index": _ROW_INDEX,
                    "booking_number": _BOOKING_NUMBER,
                },
            },
        ),
        Tool(
            name="select_row",
            description="Remember which arrest record is being edited",
            inputSchema={
                "type": "object",
                "properties": {"filepath": _FILEPATH, "row_index": _ROW_INDEX},
                "required": ["row_index"],
            },
        ),
        Tool(
            name="update_record",
            description=(
                "Write form fields (defendantName, dob, phone, bondAmount, ...) into the "
                "matching columns of an arrest record; uses the selected row if no row is given"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "filepath": _FILEPATH,
                    "row_index": _ROW_INDEX,
                    "booking_number": _BOOKING_NUMBER,
                    "fields": {
                        "type": "object",
                        "description": "Form field name to value",
                    },
                },
                "required": ["fields"],
            },
        ),
        Tool(
            name="submit_application",
            description="Append a bond application to the applications sheet",
            inputSchema={
                "type": "object",
                "properties": {
                    "filepath": _FILEPATH,
                    "application": {
                        "type": "object",
                        "description": "Form data (bookingNumber, defendantFullName, ...)",
                    },
                },
                "required": ["application"],
            },
        ),
        Tool(
            name="render_record",
            description="Render an arrest record as a Word or PDF document",
            inputSchema={
                "type": "object",
                "properties": {
                    "filepath": _FILEPATH,
                    "row_index": _ROW_INDEX,
                    "booking_number": _BOOKING_NUMBER,
                    "format": {"type": "string", "enum": ["docx", "pdf"]},
                    "output_path": {"type": "string"},
                },
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    settings = get_settings()
    logger.info("=== %s START ===", name)
    try:
        result = _dispatch(name, arguments or {}, settings)
    except (BondIntakeError, FileNotFoundError, ValueError) as e:
        logger.error("=== %s ERROR === %s: %s", name, type(e).__name__, e)
        return _error(str(e))
    logger.info("=== %s SUCCESS ===", name)
    return result


def _dispatch(name: str, arguments: dict[str, Any], settings) -> list[TextContent]:
    # -------------------------------------------------------------------------
    # DESCRIBE SHEET
    # -------------------------------------------------------------------------
    if name == "describe_sheet":
        store = _open_store(arguments)
        structure = describe_table(
            store, settings.arrests_sheet, fallback_to_active=settings.fallback_to_active_sheet
        )
        return _json(structure.model_dump())

    # -------------------------------------------------------------------------
    # READ RECORD
    # -------------------------------------------------------------------------
    elif name == "read_record":
        store = _open_store(arguments)
        row_index = _resolve_row(store, arguments)
        record = read_record(
            store,
            row_index,
            settings.arrests_sheet,
            fallback_to_active=settings.fallback_to_active_sheet,
        )
        return _json({"row_index": row_index, "record": record})

    # -------------------------------------------------------------------------
    # SELECT ROW
    # -------------------------------------------------------------------------
    elif name == "select_row":
        store = _open_store(arguments)
        row_index = int(arguments["row_index"])
        table = store.get_table(settings.arrests_sheet, fallback_to_active=settings.fallback_to_active_sheet)
        check_row_index(row_index, store.table_meta(table).last_row)
        select_row(JsonSelectionStore(settings.selection_path), row_index)
        return _json({"selected_row": row_index})

    # -------------------------------------------------------------------------
    # UPDATE RECORD
    # -------------------------------------------------------------------------
    elif name == "update_record":
        store = _open_store(arguments)
        row_index = _resolve_row(store, arguments)
        success = apply_fields(
            store,
            row_index,
            arguments.get("fields") or {},
            settings.arrests_sheet,
            fallback_to_active=settings.fallback_to_active_sheet,
        )
        store.save()
        return _json({"success": success, "row_index": row_index})

    # -------------------------------------------------------------------------
    # SUBMIT APPLICATION
    # -------------------------------------------------------------------------
    elif name == "submit_application":
        store = _open_store(arguments, create=True)
        result = append_submission(store, arguments.get("application") or {}, settings.applications_sheet)
        store.save()
        return _json(result.model_dump(mode="json"))

    # -------------------------------------------------------------------------
    # RENDER RECORD
    # -------------------------------------------------------------------------
    elif name == "render_record":
        store = _open_store(arguments)
        row_index = _resolve_row(store, arguments)
        table = store.get_table(settings.arrests_sheet, fallback_to_active=settings.fallback_to_active_sheet)
        meta = store.table_meta(table)
        check_row_index(row_index, meta.last_row)

        headers = store.read_headers(table)
        row = store.read_range(table, row_index, 1, meta.last_col)
        fmt = arguments.get("format", "docx")
        output_path = arguments.get("output_path") or settings.output_dir / f"record_{row_index}.{fmt}"

        sink = DocumentSink()
        document = render_record(headers, row, settings.document_title, sink)
        path = sink.export(document, fmt, Path(output_path))
        return _json({"row_index": row_index, "path": str(path)})

    # -------------------------------------------------------------------------
    # UNKNOWN TOOL
    # -------------------------------------------------------------------------
    else:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]


# =============================================================================
# MAIN
# =============================================================================

async def serve():
    """Run the MCP server over stdio."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    # stdout carries the MCP stream; log to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    import asyncio
    asyncio.run(serve())


if __name__ == "__main__":
    main()
