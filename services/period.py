"""
Accounting periods and money rounding helpers.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from app.exceptions import ServiceValidationError
from domain.schemas.mess_schemas import PeriodInfo


@dataclass(frozen=True)
class Period:
    """Inclusive range of calendar dates"""

    start: date
    end: date

    @property
    def label(self) -> str:
        if (self.start.year, self.start.month) == (self.end.year, self.end.month):
            return self.start.strftime("%B %Y")
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_info(self) -> PeriodInfo:
        return PeriodInfo(start=self.start, end=self.end, month=self.label)


def month_period(year: int, month: int) -> Period:
    """First through last day of a calendar month"""
    last_day = calendar.monthrange(year, month)[1]
    return Period(date(year, month, 1), date(year, month, last_day))


def current_month(now: Optional[datetime] = None) -> Period:
    """The calendar month containing ``now`` (wall clock when omitted)"""
    now = now or datetime.now()
    return month_period(now.year, now.month)


def round_money(value: float) -> float:
    """Round a currency amount to 2 decimal places for output"""
    return round(float(value or 0), 2)


def format_amount(value: float) -> str:
    """Render an amount without trailing zeros ("300", "12.5")"""
    text = f"{float(value):.2f}".rstrip("0").rstrip(".")
    return text or "0"


def period_from_filters(
    year: Optional[int] = None,
    month: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Optional[Period]:
    """
    Resolve list filters into a period.

    An explicit ``start``/``end`` pair takes precedence over ``year`` +
    ``month``. Returns None when neither is complete.
    """
    if start and end:
        if start > end:
            raise ServiceValidationError("start_date must be on or before end_date")
        return Period(start, end)
    if year and month:
        if not 1 <= month <= 12:
            raise ServiceValidationError("month must be between 1 and 12")
        return month_period(year, month)
    return None
