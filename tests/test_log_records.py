"""Tests for the record model and schema projections."""

import datetime

import pytest

from log_records import (
    LogSchema, SchemaError, USER_SCHEMA, WORKSTATION_SCHEMA, SCHEMAS,
    cell_to_datetime, from_excel_serial, to_excel_serial,
)


class TestDateSerial:
    def test_midnight_serial(self):
        assert from_excel_serial(45292) == datetime.datetime(2024, 1, 1)

    def test_unix_epoch_serial(self):
        assert from_excel_serial(25569) == datetime.datetime(1970, 1, 1)

    def test_to_serial_includes_time_of_day(self):
        assert to_excel_serial(datetime.datetime(2024, 1, 1, 12, 0)) == pytest.approx(45292.5)

    def test_round_trip_to_the_second(self):
        moment = datetime.datetime(2024, 3, 9, 14, 37, 52)
        assert from_excel_serial(to_excel_serial(moment)) == moment

    def test_sub_second_precision_is_lost(self):
        moment = datetime.datetime(2024, 3, 9, 14, 37, 52, 200000)
        assert from_excel_serial(to_excel_serial(moment)) == moment.replace(microsecond=0)

    def test_datetime_cell_goes_through_serial(self):
        moment = datetime.datetime(2024, 1, 1, 9, 0, 0, 999)
        assert cell_to_datetime(moment) == datetime.datetime(2024, 1, 1, 9, 0)

    def test_time_of_day_cell_is_a_fractional_serial(self):
        assert cell_to_datetime(datetime.time(12, 0)) == datetime.datetime(1899, 12, 30, 12, 0)

    @pytest.mark.parametrize("value", ["45292", "yesterday", None, True, float("nan")])
    def test_non_serial_cells(self, value):
        assert cell_to_datetime(value) is None


class TestColumnContract:
    @pytest.mark.parametrize("schema", SCHEMAS, ids=lambda s: s.kind)
    def test_counts_agree(self, schema, make_record):
        record = make_record()
        assert len(schema.columns()) == len(schema.to_row(record)) == schema.field_count == 13

    @pytest.mark.parametrize("schema", SCHEMAS, ids=lambda s: s.kind)
    def test_timestamp_column_is_declared(self, schema):
        assert schema.timestamp_index == 2
        assert schema.columns()[2] == "DateTime"

    def test_workstation_columns(self):
        assert WORKSTATION_SCHEMA.columns()[:3] == ["Username", "UserOU", "DateTime"]

    def test_user_columns(self):
        assert USER_SCHEMA.columns()[:3] == ["UserOU", "ComputerName", "DateTime"]

    def test_to_row_emits_datetime(self, make_record):
        row = USER_SCHEMA.to_row(make_record())
        assert isinstance(row[2], datetime.datetime)
        assert row[1] == "LAB-PC01"

    def test_display_widths_skip_timestamp(self, make_record):
        record = make_record(username="abc")
        widths = WORKSTATION_SCHEMA.display_widths(record)
        assert len(widths) == 12
        assert widths[0] == 3
        assert widths[2] == len(record.period)


class TestFromRow:
    def test_parses_valid_row(self, make_record):
        record = make_record()
        cells = WORKSTATION_SCHEMA.to_row(record)
        cells[2] = to_excel_serial(record.timestamp)
        parsed = WORKSTATION_SCHEMA.from_row(cells)
        assert WORKSTATION_SCHEMA.to_row(parsed) == WORKSTATION_SCHEMA.to_row(record)

    def test_fields_outside_projection_are_empty(self, make_record):
        parsed = WORKSTATION_SCHEMA.from_row(WORKSTATION_SCHEMA.to_row(make_record()))
        assert parsed.computer_name == ""

    def test_short_row_is_discarded(self, make_record):
        cells = WORKSTATION_SCHEMA.to_row(make_record())[:12]
        assert WORKSTATION_SCHEMA.from_row(cells) is None

    def test_text_timestamp_is_discarded(self, make_record):
        cells = WORKSTATION_SCHEMA.to_row(make_record())
        cells[2] = "2024/01/01 08:00 AM"
        assert WORKSTATION_SCHEMA.from_row(cells) is None

    def test_empty_text_cells_become_empty_strings(self, make_record):
        cells = [None] * 13
        cells[2] = 45292.25
        parsed = USER_SCHEMA.from_row(cells)
        assert parsed.user_ou == ""
        assert parsed.serial_number == ""
        assert parsed.timestamp == datetime.datetime(2024, 1, 1, 6, 0)

    def test_non_text_cells_are_read_as_text(self):
        cells = [None] * 13
        cells[2] = 45292
        cells[12] = 12345
        assert USER_SCHEMA.from_row(cells).serial_number == "12345"

    def test_extra_cells_are_ignored(self, make_record):
        cells = WORKSTATION_SCHEMA.to_row(make_record()) + ["extra"]
        assert WORKSTATION_SCHEMA.from_row(cells) is not None


class TestSchemaValidation:
    def test_timestamp_index_must_match(self):
        with pytest.raises(SchemaError):
            LogSchema(kind="bad", layout=(("A", "username"), ("When", "timestamp")), timestamp_index=0)

    def test_unknown_field(self):
        with pytest.raises(SchemaError):
            LogSchema(kind="bad", layout=(("When", "timestamp"), ("X", "nope")), timestamp_index=0)

    def test_exactly_one_timestamp(self):
        with pytest.raises(SchemaError):
            LogSchema(kind="bad", layout=(("A", "username"),), timestamp_index=0)

    def test_custom_timestamp_position(self, make_record):
        schema = LogSchema(kind="short", layout=(("When", "timestamp"), ("Who", "username")), timestamp_index=0)
        assert schema.text_columns() == [1]
        assert schema.display_widths(make_record(username="ab")) == [2]
