# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger - append engine
#
# One append = read the whole log, add one record, sort newest first, rewrite.
# Appends against the same file must not overlap; nothing here locks the file.
# ===================================================================================

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from log_records import DEFAULT_SHEET_NAME, USER_SCHEMA, WORKSTATION_SCHEMA
from log_workbook import read_records, write_records

LOG_EXTENSION = ".xlsx"


def log_name(kind, day):
    """Logical file name of one (log kind, calendar day) pair."""
    return f"{kind}_log_{day:%Y-%m-%d}"


def log_path(root, logical_name):
    return Path(root) / f"{logical_name}{LOG_EXTENSION}"


def append_log(root, logical_name, record, schema, sheet_name=DEFAULT_SHEET_NAME):
    """Append *record* to ``root/logical_name.xlsx`` and return the new row count.

    Rows sharing a timestamp keep their stored order and the new record lands
    after them (the sort is stable).
    """
    path = log_path(root, logical_name)

    records = read_records(path, schema, sheet_name)
    records.append(record)
    records.sort(key=schema.timestamp, reverse=True)

    write_records(path, schema, records, sheet_name)
    logging.info(f"Appended {schema.kind} logon to {path} ({len(records)} row(s)).")
    return len(records)


def append_logs(config, record, day=None):
    """Append *record* to today's workstation and user logs at the same time.

    The two logs live in different files, so both appends run side by side. Both
    are allowed to finish; the first failure is then re-raised.
    """
    day = day or record.timestamp.date()
    targets = (
        (config.workstation_root, WORKSTATION_SCHEMA),
        (config.user_root, USER_SCHEMA),
    )

    with ThreadPoolExecutor(max_workers=len(targets), thread_name_prefix="append") as pool:
        futures = {
            schema.kind: pool.submit(
                append_log, root, log_name(schema.kind, day), record, schema, config.sheet_name
            )
            for root, schema in targets
        }

    failures = []
    for kind, future in futures.items():
        error = future.exception()
        if error is not None:
            logging.error(f"Failed to append {kind} log: {error}")
            failures.append(error)
    if failures:
        raise failures[0]

    return {kind: future.result() for kind, future in futures.items()}
