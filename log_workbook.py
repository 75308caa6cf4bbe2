# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger - workbook codec
#
# Reads every stored record out of a log workbook and renders a full record list
# back into a fresh workbook: bold header, typed date column, sized columns,
# a filterable table and a frozen header row.
# ===================================================================================

import os
import uuid
import zipfile
import logging
from pathlib import Path

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.filters import AutoFilter
from openpyxl.worksheet.table import Table, TableStyleInfo

from log_records import DEFAULT_SHEET_NAME, LogonLoggerError

# ===================================================================================
# --- CONSTANTS ---
# ===================================================================================
DATE_FORMAT = "yyyy/mm/dd hh:mm AM/PM"
TABLE_NAME = "LogonTable"
TABLE_STYLE = "TableStyleMedium9"
COLUMN_PADDING = 2
FREEZE_CELL = "A2"


class WorkbookFormatError(LogonLoggerError):
    pass


# ===================================================================================
# --- READ PATH ---
# ===================================================================================
def read_records(path, schema, sheet_name=DEFAULT_SHEET_NAME):
    """Return every parseable record stored in the workbook at *path*.

    A missing file or a missing sheet both read as an empty log. Rows that do not
    parse are skipped; only a file that is not a workbook at all is an error.
    """
    path = Path(path)
    if not path.exists():
        return []

    try:
        wb = load_workbook(path, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        raise WorkbookFormatError(f"Cannot open log workbook {path}: {e}") from e

    if sheet_name not in wb.sheetnames:
        logging.debug(f"Sheet '{sheet_name}' not found in {path}, starting from an empty log.")
        return []

    records, dropped = [], 0
    for cells in wb[sheet_name].iter_rows(min_row=2, values_only=True):
        record = schema.from_row(cells)
        if record is None:
            dropped += 1
            continue
        records.append(record)

    if dropped:
        logging.warning(f"Skipped {dropped} unreadable row(s) in {path}.")
    return records


# ===================================================================================
# --- WRITE PATH ---
# ===================================================================================
def column_widths(schema, records):
    """Map text column index -> print width (longest value or header, plus padding)."""
    columns = schema.columns()
    widths = {i: len(columns[i]) for i in schema.text_columns()}
    for record in records:
        for i, width in zip(schema.text_columns(), schema.display_widths(record)):
            if width > widths[i]:
                widths[i] = width
    return {i: w + COLUMN_PADDING for i, w in widths.items()}


def table_ref(schema, row_count):
    return f"A1:{get_column_letter(schema.field_count)}{row_count + 1}"


def build_workbook(schema, records, sheet_name=DEFAULT_SHEET_NAME):
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    date_col = schema.timestamp_index + 1
    ws.column_dimensions[get_column_letter(date_col)].number_format = DATE_FORMAT

    bold = Font(bold=True)
    for col, label in enumerate(schema.columns(), start=1):
        ws.cell(row=1, column=col, value=label).font = bold

    for row, record in enumerate(records, start=2):
        for col, value in enumerate(schema.to_row(record), start=1):
            cell = ws.cell(row=row, column=col, value=value)
            if col == date_col:
                cell.number_format = DATE_FORMAT
            else:
                # Keep text literal even when it starts with "=".
                cell.data_type = "s"

    for i, width in column_widths(schema, records).items():
        ws.column_dimensions[get_column_letter(i + 1)].width = width

    # A table over zero data rows is invalid in the file format.
    if records:
        ref = table_ref(schema, len(records))
        table = Table(displayName=TABLE_NAME, ref=ref)
        table.tableStyleInfo = TableStyleInfo(name=TABLE_STYLE, showRowStripes=True)
        table.autoFilter = AutoFilter(ref=ref)
        ws.add_table(table)

    ws.freeze_panes = FREEZE_CELL
    return wb


def write_records(path, schema, records, sheet_name=DEFAULT_SHEET_NAME):
    """Render *records* in order and replace the workbook at *path* with them.

    Only the immediate parent directory is created. The workbook is saved next to
    the destination under a temporary name and then moved over it.
    """
    path = Path(path)
    path.parent.mkdir(exist_ok=True)

    wb = build_workbook(schema, records, sheet_name)

    temp_path = path.with_name(f".{path.stem}.{uuid.uuid4().hex}.tmp")
    try:
        wb.save(temp_path)
        os.replace(temp_path, path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise
    logging.debug(f"Wrote {len(records)} record(s) to {path}.")
