# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger - record model
#
# One canonical LogonRecord holds every fact gathered at logon. Each log kind
# (workstation, user) is a LogSchema: an ordered projection of that record onto
# spreadsheet columns.
# ===================================================================================

import datetime
from dataclasses import dataclass, fields

# ===================================================================================
# --- CONSTANTS ---
# ===================================================================================
DEFAULT_SHEET_NAME = "Logons"
TIMESTAMP_FIELD = "timestamp"

# Serial of 1970-01-01 in the 1900 date system (epoch 1899-12-30, leap-year bug kept).
EXCEL_UNIX_EPOCH_SERIAL = 25569
SECONDS_PER_DAY = 86400
_UNIX_EPOCH = datetime.datetime(1970, 1, 1)


# ===================================================================================
# --- ERRORS ---
# ===================================================================================
class LogonLoggerError(Exception):
    """Base class for every error raised by the logon logger."""


class SchemaError(LogonLoggerError):
    pass


# ===================================================================================
# --- DATE SERIALS ---
# ===================================================================================
def to_excel_serial(moment):
    """Local wall-clock datetime -> fractional day serial."""
    return (moment - _UNIX_EPOCH).total_seconds() / SECONDS_PER_DAY + EXCEL_UNIX_EPOCH_SERIAL


def from_excel_serial(serial):
    """Day serial -> local wall-clock datetime, rounded to the whole second.

    Sub-second precision does not survive the trip.
    """
    unix_seconds = round((serial - EXCEL_UNIX_EPOCH_SERIAL) * SECONDS_PER_DAY)
    return _UNIX_EPOCH + datetime.timedelta(seconds=unix_seconds)


def cell_to_datetime(value):
    """Interpret a timestamp cell, or return None when it is not a date serial.

    openpyxl hands back date-formatted cells as datetime objects, so those are
    mapped to their serial first and go through the same conversion as raw numbers.
    Serials in [0, 1) come back as a bare time of day. openpyxl also shifts serials
    1-59 (January and February 1900) by a day; nothing that early is a logon.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime.datetime):
        serial = to_excel_serial(value)
    elif isinstance(value, datetime.date):
        serial = to_excel_serial(datetime.datetime.combine(value, datetime.time()))
    elif isinstance(value, datetime.time):
        serial = (value.hour * 3600 + value.minute * 60 + value.second + value.microsecond / 1e6) / SECONDS_PER_DAY
    elif isinstance(value, (int, float)):
        serial = value
    else:
        return None
    try:
        return from_excel_serial(serial)
    except (OverflowError, ValueError):
        return None


def cell_to_text(value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


# ===================================================================================
# --- RECORD & SCHEMAS ---
# ===================================================================================
@dataclass
class LogonRecord:
    timestamp: datetime.datetime
    computer_name: str = ""
    username: str = ""
    user_ou: str = ""
    full_ou: str = ""
    ws_ou: str = ""
    period: str = ""
    description: str = ""
    os_version: str = ""
    os: str = ""
    model: str = ""
    make: str = ""
    uuid: str = ""
    serial_number: str = ""


_RECORD_FIELDS = {f.name for f in fields(LogonRecord)}


@dataclass(frozen=True)
class LogSchema:
    """Column layout of one log kind.

    ``layout`` pairs each header label with the LogonRecord attribute stored in
    that column. Exactly one column holds the timestamp and the schema states its
    position in ``timestamp_index``; the workbook codec reads it from here.
    """

    kind: str
    layout: tuple
    timestamp_index: int

    def __post_init__(self):
        attrs = [attr for _, attr in self.layout]
        unknown = [attr for attr in attrs if attr not in _RECORD_FIELDS]
        if unknown:
            raise SchemaError(f"Schema '{self.kind}' maps unknown fields: {unknown}")
        if attrs.count(TIMESTAMP_FIELD) != 1:
            raise SchemaError(f"Schema '{self.kind}' must hold exactly one timestamp column")
        if not 0 <= self.timestamp_index < len(attrs) or attrs[self.timestamp_index] != TIMESTAMP_FIELD:
            raise SchemaError(
                f"Schema '{self.kind}' declares timestamp column {self.timestamp_index}, "
                f"found it at {attrs.index(TIMESTAMP_FIELD)}"
            )

    @property
    def field_count(self):
        return len(self.layout)

    def columns(self):
        return [label for label, _ in self.layout]

    def text_columns(self):
        """Indices of every column except the timestamp one."""
        return [i for i in range(self.field_count) if i != self.timestamp_index]

    def to_row(self, record):
        return [getattr(record, attr) for _, attr in self.layout]

    def from_row(self, cells):
        """Build a record from one row of cell values, or None if it cannot be used."""
        cells = tuple(cells)
        if len(cells) < self.field_count:
            return None
        moment = cell_to_datetime(cells[self.timestamp_index])
        if moment is None:
            return None
        values = {TIMESTAMP_FIELD: moment}
        for index in self.text_columns():
            values[self.layout[index][1]] = cell_to_text(cells[index])
        return LogonRecord(**values)

    def timestamp(self, record):
        return record.timestamp

    def display_widths(self, record):
        row = self.to_row(record)
        return [len(row[i]) for i in self.text_columns()]


# Fields shared by both logs, from the Period column onwards.
_SHARED_LAYOUT = (
    ("Period", "period"),
    ("Description", "description"),
    ("WS_OU", "ws_ou"),
    ("OSVersion", "os_version"),
    ("Model", "model"),
    ("OS", "os"),
    ("Full_OU", "full_ou"),
    ("Make", "make"),
    ("UUID", "uuid"),
    ("Serial_Number", "serial_number"),
)

WORKSTATION_SCHEMA = LogSchema(
    kind="workstation",
    layout=(("Username", "username"), ("UserOU", "user_ou"), ("DateTime", TIMESTAMP_FIELD)) + _SHARED_LAYOUT,
    timestamp_index=2,
)

USER_SCHEMA = LogSchema(
    kind="user",
    layout=(("UserOU", "user_ou"), ("ComputerName", "computer_name"), ("DateTime", TIMESTAMP_FIELD)) + _SHARED_LAYOUT,
    timestamp_index=2,
)

SCHEMAS = (WORKSTATION_SCHEMA, USER_SCHEMA)
