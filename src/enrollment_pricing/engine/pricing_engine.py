"""
Quote Engine - Package pricing resolution with traceability.

Computes the price of a tutoring session package:
- Base price from the program level (default-level fallback)
- Package discount from the session count
- Time adjustment (reserved, always zero)
- Promo discount on the post-package subtotal
- Expiry window from the session count

Every fallback taken is recorded as a warning on the result, so the
checkout flow can keep going while operators can still see what happened.
"""
import logging
import math
import numbers
from typing import Optional

from ..config.pricing_tables import DEFAULT_PRICING_TABLES, PricingTables, load_pricing_tables
from ..config.settings import get_settings, Settings
from .errors import QuoteValidationError
from .models import QuoteBreakdown, QuoteRequest, QuoteResult

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = 'USD'


def percent_of(amount_cents: int, pct: int) -> int:
    """
    Integer percentage of an amount, rounded half-up.

    Same result as ``Math.round(amount * pct / 100)``: x.5 rounds toward
    positive infinity. Evaluated entirely in integers.
    """
    return (2 * amount_cents * pct + 100) // 200


def validate_sessions(sessions) -> int:
    """Return ``sessions`` as an int, or raise QuoteValidationError."""
    if isinstance(sessions, bool) or not isinstance(sessions, numbers.Real):
        raise QuoteValidationError('sessions', f"must be a number, got {type(sessions).__name__}")
    if isinstance(sessions, numbers.Integral):
        value = int(sessions)
    else:
        if not math.isfinite(sessions):
            raise QuoteValidationError('sessions', f"must be finite, got {sessions}")
        if not float(sessions).is_integer():
            raise QuoteValidationError('sessions', f"must be a whole number, got {sessions}")
        value = int(sessions)
    if value < 0:
        raise QuoteValidationError('sessions', f"must not be negative, got {value}")
    return value


def validate_level(level) -> str:
    """Return the stripped level identifier, or raise QuoteValidationError."""
    if not isinstance(level, str):
        raise QuoteValidationError('level', "is required")
    level = level.strip()
    if not level:
        raise QuoteValidationError('level', "must not be blank")
    return level


def normalize_promo_code(promo_code: Optional[str]) -> Optional[str]:
    """Trim and upper-case a promo code; blank or missing codes become None."""
    if not promo_code:
        return None
    code = str(promo_code).strip().upper()
    return code or None


def decide_expiry_days_for_sessions(sessions: int, tables: PricingTables = DEFAULT_PRICING_TABLES) -> int:
    """Days within which a package's sessions must be used (8→30, 16→60, 24→90)."""
    terms = tables.package(sessions)
    if terms is None:
        return tables.fallback_expiry_days
    return terms.expiry_days


def base_price_for_level(level: str, tables: PricingTables = DEFAULT_PRICING_TABLES) -> int:
    """Package base price in cents; unknown levels get the default level's price."""
    program = tables.level(level)
    if program is None:
        return tables.default_base_cents
    return program.base_cents


def package_discount_pct(sessions: int, tables: PricingTables = DEFAULT_PRICING_TABLES) -> int:
    """Package discount percentage (8→0, 16→10, 24→20, others→0)."""
    terms = tables.package(sessions)
    if terms is None:
        return tables.fallback_discount_pct
    return terms.discount_pct


def promo_discount_cents(
    subtotal_cents: int,
    promo_code: Optional[str],
    tables: PricingTables = DEFAULT_PRICING_TABLES
) -> int:
    """Promo discount on the subtotal; unrecognized codes discount nothing."""
    code = normalize_promo_code(promo_code)
    if code is None:
        return 0
    pct = tables.promo_pct(code)
    if pct is None:
        return 0
    return percent_of(subtotal_cents, pct)


class PricingEngine:
    """
    Core quote engine that prices a package using Level → Package → Promo pipeline.

    Resolution order:
    1. Base price from the level table (fall back to the default level)
    2. Package discount percentage from the session count (fall back to 0%)
    3. Time adjustment (currently always 0)
    4. Promo discount on the subtotal, if the code is recognized
    5. Total clamped at zero
    6. Expiry window from the session count (fall back to 30 days)

    The engine holds only immutable tables, so one instance can serve
    any number of concurrent callers.
    """

    def __init__(self, tables: Optional[PricingTables] = None, settings: Optional[Settings] = None):
        """Initialize engine with explicit tables, or load them from settings."""
        self.settings = settings
        if tables is None:
            self.settings = settings or get_settings()
            tables = load_pricing_tables(self.settings.pricing_dir)
        self.tables = tables
        self.default_currency = self.settings.default_currency if self.settings else DEFAULT_CURRENCY

    def reload_data(self):
        """Reload pricing tables from the configured data directory."""
        settings = self.settings or get_settings()
        self.tables = load_pricing_tables(settings.pricing_dir)
        self.settings = settings

    def quote(
        self,
        level: str,
        sessions: int,
        promo_code: Optional[str] = None,
        currency: Optional[str] = None
    ) -> QuoteResult:
        """Calculate a quote from plain arguments."""
        return self.calculate(QuoteRequest(
            level=level,
            sessions=sessions,
            promo_code=promo_code,
            currency=currency,
        ))

    def calculate(self, request: QuoteRequest) -> QuoteResult:
        """
        Calculate a quote with full traceability.

        Args:
            request: QuoteRequest with level, sessions and optional promo/currency

        Returns:
            QuoteResult with breakdown, expiry window, trace and warnings

        Raises:
            QuoteValidationError: level missing/blank or sessions not a
                non-negative whole number
        """
        level = validate_level(request.level)
        sessions = validate_sessions(request.sessions)
        currency = request.currency if request.currency is not None else self.default_currency
        tables = self.tables

        warnings = []
        trace = []

        # 1. Base price
        program = tables.level(level)
        if program is not None:
            base = program.base_cents
            trace.append(("Level Lookup", f"Base price for {program.name}", f"{base}"))
        else:
            base = tables.default_base_cents
            warnings.append(f"Unknown level '{level}', using {tables.default_level} base price")
            trace.append(("Level Lookup", f"Unknown level, falling back to {tables.default_level}", f"{base}"))
            logger.debug("Unknown level %r, falling back to %s", level, tables.default_level)

        # 2. Package discount
        terms = tables.package(sessions)
        if terms is None:
            warnings.append(f"Non-standard package of {sessions} sessions, no package discount applied")
            logger.debug("No package terms for %d sessions", sessions)
        pkg_pct = package_discount_pct(sessions, tables)
        pkg_discount = percent_of(base, pkg_pct)
        trace.append(("Package Discount", f"{pkg_pct}% off for {sessions} sessions", f"-{pkg_discount}"))

        # 3. Time adjustment
        time_adj = 0
        trace.append(("Time Adjustment", "No demand-based adjustment", f"{time_adj}"))

        # 4. Promo
        subtotal = base + time_adj - pkg_discount
        code = normalize_promo_code(request.promo_code)
        promo = promo_discount_cents(subtotal, code, tables)
        applied_code = None
        if code is None:
            trace.append(("Promo", "No promo code supplied"))
        elif tables.promo_pct(code) is None:
            warnings.append(f"Promo code '{code}' not recognized")
            trace.append(("Promo", f"Code {code} not recognized", "0"))
            logger.debug("Ignoring unrecognized promo code %r", code)
        else:
            applied_code = code
            trace.append(("Promo", f"{tables.promo_pct(code)}% off subtotal {subtotal} with {code}", f"-{promo}"))

        # 5. Total
        total = max(0, subtotal - promo)
        trace.append(("Total", f"Subtotal {subtotal} less promo {promo}", f"{total}"))

        # 6. Expiry
        expiry_days = decide_expiry_days_for_sessions(sessions, tables)
        trace.append(("Expiry", f"Sessions must be used within {expiry_days} days", f"{expiry_days}"))

        result = QuoteResult(
            currency=currency,
            total_cents=total,
            breakdown=QuoteBreakdown(
                base_cents=base,
                package_discount_cents=pkg_discount,
                time_adj_cents=time_adj,
                promo_cents=promo,
            ),
            expiry_days=expiry_days,
            level=level,
            sessions=sessions,
            promo_code=applied_code,
        )
        for step, desc, *val in trace:
            result.add_trace(step, desc, val[0] if val else None)
        for warning in warnings:
            result.add_warning(warning)

        return result


def compute_quote(
    level: str,
    sessions: int,
    promo_code: Optional[str] = None,
    currency: Optional[str] = DEFAULT_CURRENCY,
    tables: Optional[PricingTables] = None
) -> QuoteResult:
    """
    Compute a package quote without touching settings or files.

    Uses the built-in tables unless ``tables`` is given.
    """
    engine = PricingEngine(tables=tables or DEFAULT_PRICING_TABLES)
    return engine.quote(level, sessions, promo_code, currency)
