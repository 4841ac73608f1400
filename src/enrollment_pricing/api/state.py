"""
Shared service instances for the API routers.
"""
from ..engine import PricingEngine
from ..services.checkout_service import CheckoutService
from ..config.settings import get_settings

settings = get_settings()
engine = PricingEngine(settings=settings)
checkout_service = CheckoutService(settings=settings)
