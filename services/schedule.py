# services/schedule.py
"""
Schedule generator - the ordered due dates of a lease from its first
payment date up to a cut-off date.
"""
from datetime import date, datetime
from typing import List, Optional, Union

from config import settings
from services.errors import InvalidDateRange
from services.frequency import FrequencyLike, parse_frequency, shift_date


DateLike = Union[date, datetime, str]


def coerce_date(value: DateLike, field: str = "start_date") -> date:
     """
     Convert a date, datetime or ISO string to a date (time of day dropped).

     Raises:
          InvalidDateRange: If the value is not a valid date
     """
     if isinstance(value, datetime):
          return value.date()
     if isinstance(value, date):
          return value
     if isinstance(value, str) and value.strip():
          text = value.strip()
          try:
               return date.fromisoformat(text[:10])
          except ValueError:
               pass
          try:
               return datetime.fromisoformat(text).date()
          except ValueError:
               pass
     raise InvalidDateRange(f"Invalid {field}: {value!r}")


def generate_due_dates(
     start_date: DateLike,
     frequency: FrequencyLike,
     as_of: DateLike,
     max_periods: Optional[int] = None
) -> List[date]:
     """
     Generate the due dates from start_date through as_of, inclusive.

     The first element is start_date itself; each following date is one more
     period after start_date. The first date past as_of is discarded. A
     start_date after as_of gives an empty list.

     Args:
          start_date: First due date
          frequency: Payment frequency (daily, weekly, monthly, quarterly, biannual, annual)
          as_of: Last date a payment may fall due on
          max_periods: Upper bound on the number of dates (default: settings.MAX_SCHEDULE_PERIODS)

     Returns:
          Ordered list of due dates

     Raises:
          InvalidFrequency: If the frequency is not recognized
          InvalidDateRange: If a date is malformed or the schedule exceeds max_periods
     """
     freq = parse_frequency(frequency)
     start = coerce_date(start_date, "start_date")
     cutoff = coerce_date(as_of, "as_of")
     limit = max_periods if max_periods is not None else settings.MAX_SCHEDULE_PERIODS

     due_dates: List[date] = []
     current = start
     while current <= cutoff:
          if len(due_dates) >= limit:
               raise InvalidDateRange(
                    f"Schedule from {start} to {cutoff} exceeds {limit} {freq.value} periods"
               )
          due_dates.append(current)
          current = shift_date(freq, start, len(due_dates))

     return due_dates
