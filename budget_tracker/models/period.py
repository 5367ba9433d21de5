"""
Sheet Periods

A Period is an inclusive date range attached to every expense sheet.
Month and year periods are derived with date arithmetic only: the end of
a period is always "the day before the next period starts", so leap
years and December rollover need no day-count tables.
"""

from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from budget_tracker.errors import InvalidDataError, InvalidPeriodError


ONE_DAY = timedelta(days=1)


class Period(BaseModel):
    """
    Inclusive date range.

    Build instances through the factory classmethods. Decoding from disk
    runs the same start <= end check.
    """
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def validate_order(self) -> "Period":
        if self.start > self.end:
            raise ValueError(
                f"Start date {self.start} must not be after end date {self.end}"
            )
        return self

    @classmethod
    def range(cls, start: date, end: date) -> "Period":
        """Build a period from explicit bounds."""
        if start > end:
            raise InvalidPeriodError(
                f"Start date {start} must not be after end date {end}"
            )
        return cls(start=start, end=end)

    @classmethod
    def month(cls, month: int, year: int) -> "Period":
        """Period covering one calendar month."""
        if not 1 <= month <= 12:
            raise InvalidDataError(f"Month must be between 1 and 12, got {month}")

        try:
            start = date(year, month, 1)
            if month == 12:
                next_start = date(year + 1, 1, 1)
            else:
                next_start = date(year, month + 1, 1)
        except (ValueError, OverflowError) as exc:
            raise InvalidDataError(f"Failed to create a date: {exc}") from exc

        return cls.range(start, next_start - ONE_DAY)

    @classmethod
    def year(cls, year: int) -> "Period":
        """Period covering one calendar year."""
        try:
            start = date(year, 1, 1)
            next_start = date(year + 1, 1, 1)
        except (ValueError, OverflowError) as exc:
            raise InvalidDataError(f"Failed to create a date: {exc}") from exc

        return cls.range(start, next_start - ONE_DAY)

    @classmethod
    def current_month(cls, today: Optional[date] = None) -> "Period":
        today = today or date.today()
        return cls.month(today.month, today.year)

    @classmethod
    def current_year(cls, today: Optional[date] = None) -> "Period":
        today = today or date.today()
        return cls.year(today.year)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"
