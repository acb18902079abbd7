from decimal import Decimal

from utils.formatting import format_indian_currency, format_money


def test_format_money_rounds_half_up_to_two_places():
    assert format_money(Decimal("500")) == "500.00"
    assert format_money(Decimal("10.005")) == "10.01"
    assert format_money(Decimal("-50.125")) == "-50.13"
    assert format_money(None) == "0.00"


def test_format_indian_currency_groups_lakhs_and_crores():
    assert format_indian_currency(Decimal("999")) == "Rs. 999.00"
    assert format_indian_currency(Decimal("1234567.5")) == "Rs. 12,34,567.50"
    assert format_indian_currency(Decimal("123456789")) == "Rs. 12,34,56,789.00"


def test_format_indian_currency_negative_amounts():
    assert format_indian_currency(Decimal("-12345")) == "-Rs. 12,345.00"
    assert format_indian_currency(Decimal("-50")) == "-Rs. 50.00"
