from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional

DATE_FORMAT = "%Y-%m-%d"


class DateRangeError(ValueError):
    """Raised for malformed ledger date bounds."""


class DateRange(BaseModel):
    """Inclusive date bounds. Either side may be open (None)."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    class Config:
        frozen = True

    @property
    def is_bounded(self) -> bool:
        return self.start_date is not None or self.end_date is not None


def in_range(value: date, date_range: Optional[DateRange]) -> bool:
    if date_range is None:
        return True
    if date_range.start_date is not None and value < date_range.start_date:
        return False
    if date_range.end_date is not None and value > date_range.end_date:
        return False
    return True


def _parse_date(value: Optional[str], field: str) -> Optional[date]:
    if value is None or value.strip() == "":
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise DateRangeError(f"Invalid {field} '{value}'. Please use YYYY-MM-DD")


def parse_date_range(start_date: Optional[str] = None, end_date: Optional[str] = None) -> DateRange:
    """
    Build a DateRange from query-string values.

    Both values are optional and independent. Raises DateRangeError when a value
    is not a YYYY-MM-DD date or when the end date falls before the start date.
    """
    start = _parse_date(start_date, "startDate")
    end = _parse_date(end_date, "endDate")
    if start is not None and end is not None and start > end:
        raise DateRangeError("Start date cannot be after the end date")
    return DateRange(start_date=start, end_date=end)
