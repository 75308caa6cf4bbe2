import datetime

import pytest

from log_records import LogonRecord


@pytest.fixture
def make_record():
    def _make(when="2024-01-01 08:00", **overrides):
        if isinstance(when, str):
            when = datetime.datetime.strptime(when, "%Y-%m-%d %H:%M")
        values = dict(
            timestamp=when,
            computer_name="LAB-PC01",
            username="Jane Doe",
            user_ou="Teachers",
            full_ou="OU=Lab_Library",
            ws_ou="Library",
            period="Before School",
            description="Windows 11 Education",
            os_version="23H2",
            os="Windows 10 Education",
            model="OptiPlex 7010",
            make="Dell Inc.",
            uuid="4C4C4544-0042-3510-8052-B4C04F4E4A32",
            serial_number="B5RNJ42",
        )
        values.update(overrides)
        return LogonRecord(**values)

    return _make
