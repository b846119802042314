# services/frequency.py
"""
Frequency calendar - maps a payment frequency to its date-advancement rule.

Month-based frequencies use dateutil's relativedelta, which clamps to the
last valid day of the target month (2024-01-31 + 1 month = 2024-02-29).
shift_date() always counts from the anchor date so the clamp never
accumulates across a schedule.
"""
from datetime import date
from typing import Union

from dateutil.relativedelta import relativedelta

from models.lease import PaymentFrequency
from services.errors import InvalidFrequency


FrequencyLike = Union[PaymentFrequency, str]

# Step of one period for each frequency
_PERIOD_STEPS = {
     PaymentFrequency.DAILY: relativedelta(days=1),
     PaymentFrequency.WEEKLY: relativedelta(days=7),
     PaymentFrequency.MONTHLY: relativedelta(months=1),
     PaymentFrequency.QUARTERLY: relativedelta(months=3),
     PaymentFrequency.BIANNUAL: relativedelta(months=6),
     PaymentFrequency.ANNUAL: relativedelta(years=1),
}


def parse_frequency(frequency: FrequencyLike) -> PaymentFrequency:
     """
     Normalize a frequency value.

     Raises:
          InvalidFrequency: If the value is not a known frequency
     """
     if isinstance(frequency, PaymentFrequency):
          return frequency
     if not isinstance(frequency, str):
          raise InvalidFrequency(frequency)
     try:
          return PaymentFrequency(frequency)
     except ValueError:
          raise InvalidFrequency(frequency) from None


def period_step(frequency: FrequencyLike) -> relativedelta:
     """Length of one period of the given frequency."""
     return _PERIOD_STEPS[parse_frequency(frequency)]


def shift_date(frequency: FrequencyLike, anchor: date, periods: int) -> date:
     """Date `periods` periods after `anchor`."""
     return anchor + period_step(frequency) * periods


def next_due_date(frequency: FrequencyLike, reference: date) -> date:
     """Date one period after `reference`."""
     return shift_date(frequency, reference, 1)
