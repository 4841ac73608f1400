"""
Checkout Service - Turns a quote into the payment gateway hand-off.

Builds the payment request body and the hosted payment-page link for an
enrollment. The gateway itself is called by the payment collaborator; this
module only decides the amount, currency, idempotency key and URLs.
"""
import logging
import uuid
from dataclasses import dataclass, asdict
from typing import Optional
from urllib.parse import quote as url_quote, urlencode

from ..config.settings import Settings, get_settings
from ..engine.models import QuoteResult

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = 'Course Enrollment'


class CheckoutError(ValueError):
    """Raised when a quote cannot be handed to the payment gateway."""


class CheckoutConfigurationError(CheckoutError):
    """Raised when the payment gateway credentials are not configured."""


@dataclass
class PaymentRequest:
    """Body for the gateway's create-payment call."""
    idempotency_key: str
    source_id: str
    location_id: Optional[str]
    amount_cents: int
    currency: str

    def to_gateway_dict(self) -> dict:
        """Convert to the gateway's camelCase request shape."""
        return {
            'idempotencyKey': self.idempotency_key,
            'sourceId': self.source_id,
            'locationId': self.location_id,
            'amountMoney': {
                'amount': self.amount_cents,
                'currency': self.currency,
            },
        }


@dataclass
class PaymentLink:
    """A hosted payment page for one enrollment."""
    order_id: str
    payment_link: str
    redirect_url: str
    amount_cents: int
    currency: str
    description: str
    note: str
    customer_email: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class CheckoutService:
    """Service for handing quotes to the payment collaborator."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _check_configured(self):
        if not self.settings.square_configured:
            raise CheckoutConfigurationError("Server missing Square configuration")

    def _check_amount(self, quote: QuoteResult):
        if quote.total_cents <= 0:
            raise CheckoutError(f"Quote total must be positive to charge, got {quote.total_cents}")
        if not quote.currency:
            raise CheckoutError("Quote currency is missing")

    def build_payment_request(self, quote: QuoteResult, source_id: str) -> PaymentRequest:
        """
        Build a create-payment request charging the quote total.

        Args:
            quote: Quote whose total and currency are charged
            source_id: Card nonce / token from the payment form

        Returns:
            PaymentRequest with a fresh idempotency key
        """
        if not source_id or not str(source_id).strip():
            raise CheckoutError("Missing sourceId")
        self._check_amount(quote)
        self._check_configured()

        request = PaymentRequest(
            idempotency_key=str(uuid.uuid4()),
            source_id=str(source_id).strip(),
            location_id=self.settings.square_location_id,
            amount_cents=quote.total_cents,
            currency=quote.currency.upper(),
        )
        logger.info(
            "Payment request built: amount=%d currency=%s level=%s sessions=%d",
            request.amount_cents, request.currency, quote.level, quote.sessions,
        )
        return request

    def build_payment_link(
        self,
        quote: QuoteResult,
        description: Optional[str] = None,
        origin: Optional[str] = None,
        customer_email: Optional[str] = None,
        program_name: Optional[str] = None
    ) -> PaymentLink:
        """
        Build the hosted payment page link and success redirect for a quote.

        ``origin`` is the requesting site; it defaults to the configured
        frontend URL.
        """
        self._check_configured()
        self._check_amount(quote)

        base_url = (origin or self.settings.frontend_url).rstrip('/')
        description = description or DEFAULT_DESCRIPTION
        currency = quote.currency.upper()
        order_id = str(uuid.uuid4())

        query = urlencode(
            {
                'orderId': order_id,
                'amount': quote.total_cents,
                'currency': currency,
                'description': description,
            },
            quote_via=url_quote,
        )
        link = PaymentLink(
            order_id=order_id,
            payment_link=f"{base_url}/payment?{query}",
            redirect_url=f"{base_url}/payment-success?orderId={order_id}",
            amount_cents=quote.total_cents,
            currency=currency,
            description=description,
            note=f"Enrollment for {program_name or 'Course'}",
            customer_email=customer_email,
        )
        logger.info("Payment link created: order=%s amount=%d currency=%s", order_id, link.amount_cents, currency)
        return link
