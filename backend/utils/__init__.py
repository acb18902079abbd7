from .date_range import DateRange, DateRangeError, in_range, parse_date_range
from .formatting import format_money, format_indian_currency

__all__ = ['DateRange', 'DateRangeError', 'format_indian_currency', 'format_money', 'in_range', 'parse_date_range']
