""" Reporting days and reporting windows.

    Every fact is filed under a reporting day derived from its UTC
    timestamp. The day is the calendar date in the organization's
    business timezone, moved forward by one day so that reports line
    up with the dates staff have always seen on them.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

import pendulum
import pytz

from apps.common.errors import ValidationError

report_tz = pytz.timezone("America/Halifax")

DAY_CORRECTION = timedelta(days=1)


def local_date(ts: datetime) -> date:
    """Calendar date of a timestamp in the reporting timezone. Naive
    timestamps are treated as UTC."""
    if ts.tzinfo is None:
        ts = pytz.utc.localize(ts)
    return ts.astimezone(report_tz).date()


def bucket_date(ts: datetime) -> str:
    """The reporting day key (YYYY-MM-DD) for a timestamp."""
    return (local_date(ts) + DAY_CORRECTION).isoformat()


@dataclass(frozen=True)
class ReportWindow:
    """A whole year (month 0) or a single calendar month, in naive UTC."""

    year: int | None
    month: int = 0

    @property
    def is_all_time(self) -> bool:
        return self.year is None

    @property
    def start(self) -> datetime | None:
        if self.year is None:
            return None
        return pendulum.naive(self.year, self.month or 1, 1)

    @property
    def end(self) -> datetime | None:
        if self.year is None:
            return None
        unit = "month" if self.month else "year"
        return pendulum.naive(self.year, self.month or 1, 1).end_of(unit)

    def filter(self, column):
        """SQLAlchemy criteria restricting a timestamp column to the window."""
        if self.year is None:
            return []
        return [column >= self.start, column <= self.end]

    def contains(self, ts: datetime) -> bool:
        if self.year is None:
            return True
        return self.start <= ts <= self.end

    @property
    def label(self) -> str:
        """Used in export filenames."""
        return f"{self.year if self.year is not None else 'all'}-{self.month}"

    @classmethod
    def from_args(cls, args, year_required: bool = True) -> "ReportWindow":
        """Parse ``month`` (0-12, "all" or absent) and ``year`` query parameters."""
        raw_month = (args.get("month") or "").strip().lower()
        if raw_month in ("", "all"):
            month = 0
        else:
            try:
                month = int(raw_month)
            except ValueError as e:
                raise ValidationError("Invalid month") from e
            if not 0 <= month <= 12:
                raise ValidationError("Invalid month")

        raw_year = (args.get("year") or "").strip()
        if not raw_year or raw_year.lower() == "all":
            if year_required:
                raise ValidationError("Year is required")
            return cls(year=None, month=0)

        try:
            year = int(raw_year)
        except ValueError as e:
            raise ValidationError("Invalid year") from e
        if not 1 <= year <= 9999:
            raise ValidationError("Invalid year")

        return cls(year=year, month=month)
