"""
Data models for the quote engine.

Uses dataclasses for structured, type-safe data representation.
All money fields are integers in minor currency units (cents).
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class TraceStep:
    """A single step in the quote resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class QuoteRequest:
    """A quote request for one session package."""
    level: str
    sessions: int
    promo_code: Optional[str] = None
    currency: Optional[str] = None


@dataclass(frozen=True)
class QuoteBreakdown:
    """Itemized amounts that make up a quote total."""
    base_cents: int
    package_discount_cents: int
    time_adj_cents: int
    promo_cents: int

    @property
    def subtotal_cents(self) -> int:
        """Price after package discount and time adjustment, before promo."""
        return self.base_cents + self.time_adj_cents - self.package_discount_cents

    def to_api_dict(self) -> dict:
        return {
            "baseCents": self.base_cents,
            "packageDiscountCents": self.package_discount_cents,
            "timeAdjCents": self.time_adj_cents,
            "promoCents": self.promo_cents,
        }


@dataclass
class QuoteResult:
    """Complete result of a quote calculation."""
    currency: str
    total_cents: int
    breakdown: QuoteBreakdown
    expiry_days: int

    # Resolved inputs
    level: str = ""
    sessions: int = 0
    promo_code: Optional[str] = None  # Normalized code, only when recognized

    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the result-level trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a result-level warning."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_api_dict(self) -> dict:
        """Convert to the camelCase shape the enrollment frontend consumes."""
        return {
            "currency": self.currency,
            "totalCents": self.total_cents,
            "breakdown": self.breakdown.to_api_dict(),
            "expiryDays": self.expiry_days,
        }
