import sys
import os

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from enrollment_pricing.config.pricing_tables import (
    DEFAULT_PRICING_TABLES,
    PackageTerms,
    PricingTables,
    ProgramLevel,
)
from enrollment_pricing.engine import PricingEngine


@pytest.fixture(scope="module")
def engine():
    """Engine over the built-in tables; no settings or files involved."""
    return PricingEngine(tables=DEFAULT_PRICING_TABLES)


@pytest.fixture
def fixture_tables():
    """Odd-valued tables for exercising rounding and substitution."""
    return PricingTables(
        levels={
            'starter': ProgramLevel('starter', 'Starter', 8005),
            'pro': ProgramLevel('pro', 'Pro', 995),
        },
        packages={
            4: PackageTerms(4, 5, 14),
            10: PackageTerms(10, 15, 45),
        },
        promo_codes={'half': 50, 'free': 100},
        default_level='pro',
        fallback_expiry_days=7,
    )
