"""Engine subpackage - core quote logic and resolution."""
from .pricing_engine import PricingEngine, compute_quote
from .models import QuoteRequest, QuoteBreakdown, QuoteResult
from .errors import QuoteValidationError

__all__ = ['PricingEngine', 'compute_quote', 'QuoteRequest', 'QuoteBreakdown', 'QuoteResult', 'QuoteValidationError']
