"""
Display formatting for quote amounts.
"""
from decimal import Decimal

CURRENCY_SYMBOLS = {
    'USD': '$',
    'CAD': 'CA$',
    'AUD': 'A$',
    'GBP': '£',
    'EUR': '€',
}


def format_cents(cents: int, currency: str = 'USD') -> str:
    """
    Format minor units for display, e.g. 123450 USD -> "$1,234.50".

    Currencies without a known symbol render as "1,234.50 XYZ".
    """
    code = (currency or 'USD').upper()
    amount = (Decimal(abs(int(cents))) / 100).quantize(Decimal('0.01'))
    sign = '-' if cents < 0 else ''
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{amount:,.2f}"
    return f"{sign}{amount:,.2f} {code}"
