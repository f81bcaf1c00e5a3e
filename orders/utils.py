from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOL = '₹'
TWO_PLACES = Decimal('0.01')


def to_money(value):
    """Coerce a number to a Decimal rounded to paise"""
    if value is None:
        value = Decimal('0')
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_currency(value):
    """Render an amount the way every screen and report shows it: ₹285.50"""
    return f"{CURRENCY_SYMBOL}{to_money(value)}"
