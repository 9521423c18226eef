"""Date domain primitives for taskcadence."""

from taskcadence.dates.calendar_math import (
    PeriodType,
    add_months,
    at_midnight,
    days_between,
    days_in_month,
    to_day,
    utcnow,
)
from taskcadence.dates.deadline import Deadline
from taskcadence.dates.instants import EventTime, Timestamp
from taskcadence.dates.period_start import PeriodStart
from taskcadence.dates.service import DateDomainService

__all__ = [
    "PeriodType",
    "add_months",
    "at_midnight",
    "days_between",
    "days_in_month",
    "to_day",
    "utcnow",
    "Deadline",
    "EventTime",
    "Timestamp",
    "PeriodStart",
    "DateDomainService",
]
