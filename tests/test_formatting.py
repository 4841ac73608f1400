import pytest

from enrollment_pricing.engine.formatting import format_cents


@pytest.mark.parametrize("cents, currency, expected", [
    (10000, "USD", "$100.00"),
    (7200, "usd", "$72.00"),
    (123450, "USD", "$1,234.50"),
    (5, "USD", "$0.05"),
    (0, "USD", "$0.00"),
    (-2000, "USD", "-$20.00"),
    (9720, "GBP", "£97.20"),
    (100000000, "EUR", "€1,000,000.00"),
    (9720, "NZD", "97.20 NZD"),
    (9720, None, "$97.20"),
])
def test_format_cents(cents, currency, expected):
    assert format_cents(cents, currency) == expected
