from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")

def format_money(amount) -> str:
    """Plain two-decimal amount, e.g. 1234.50 or -50.00."""
    if amount is None:
        amount = 0
    return str(Decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))

def format_indian_currency(amount, symbol: str = "Rs.") -> str:
    """Two-decimal amount with lakh/crore digit grouping, e.g. Rs. 12,34,567.00"""
    amount_str = format_money(amount)
    sign = ""
    if amount_str.startswith("-"):
        sign, amount_str = "-", amount_str[1:]
    integer_part, decimal_part = amount_str.split(".")

    if len(integer_part) <= 3:
        return f"{sign}{symbol} {integer_part}.{decimal_part}"

    last_three = integer_part[-3:]
    remaining = integer_part[:-3]

    formatted_remaining = ""
    while len(remaining) > 2:
        formatted_remaining = "," + remaining[-2:] + formatted_remaining
        remaining = remaining[:-2]

    formatted_remaining = remaining + formatted_remaining

    return f"{sign}{symbol} {formatted_remaining},{last_three}.{decimal_part}"
