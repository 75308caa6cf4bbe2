# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger - school day periods
# ===================================================================================

import datetime
from dataclasses import dataclass

from log_records import LogonLoggerError


class PeriodError(LogonLoggerError):
    pass


@dataclass(frozen=True)
class TimePeriod:
    """Half-open time window [start, end). Wraps past midnight when end <= start."""

    start: datetime.time
    end: datetime.time
    name: str

    @property
    def wraps_midnight(self):
        return self.end <= self.start

    def contains(self, moment):
        if self.wraps_midnight:
            return moment >= self.start or moment < self.end
        return self.start <= moment < self.end


def hm(hour, minute):
    return datetime.time(hour, minute)


PERIODS = (
    TimePeriod(hm(5, 0), hm(8, 45), "Before School"),
    TimePeriod(hm(8, 45), hm(8, 55), "Form"),
    TimePeriod(hm(8, 55), hm(10, 5), "Period 1"),
    TimePeriod(hm(10, 5), hm(11, 15), "Period 2"),
    TimePeriod(hm(11, 15), hm(11, 55), "Morning Tea"),
    TimePeriod(hm(11, 55), hm(13, 5), "Period 3"),
    TimePeriod(hm(13, 5), hm(13, 45), "Second Lunch"),
    TimePeriod(hm(13, 45), hm(14, 55), "Period 4"),
    TimePeriod(hm(14, 55), hm(5, 0), "After Hours"),
)


def current_period(when, periods=PERIODS):
    """Label of the first period containing the time of day of *when*."""
    moment = when.time() if isinstance(when, datetime.datetime) else when
    for period in periods:
        if period.contains(moment):
            return period.name
    raise PeriodError(f"Time {moment} does not fall into any defined period")
