"""
Checkout API - FastAPI router for the payment hand-off.

The amount charged is always re-quoted on the server from the enrollment
selection; clients never send a raw amount.
"""
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from ..engine import QuoteValidationError
from ..services.checkout_service import CheckoutConfigurationError, CheckoutError
from .state import engine, checkout_service

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


class EnrollmentSelection(BaseModel):
    """Level / package / promo chosen on the enrollment form."""
    model_config = ConfigDict(populate_by_name=True)

    level: str
    sessions: int
    promo_code: Optional[str] = Field(default=None, alias="promoCode")
    currency: Optional[str] = None


class PaymentRequestIn(EnrollmentSelection):
    """Request model for building a create-payment body."""
    source_id: Optional[str] = Field(default=None, alias="sourceId")


class PaymentLinkIn(EnrollmentSelection):
    """Request model for creating a hosted payment link."""
    description: Optional[str] = None
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    program_name: Optional[str] = Field(default=None, alias="programName")


def _quote(selection: EnrollmentSelection):
    try:
        return engine.quote(selection.level, selection.sessions, selection.promo_code, selection.currency)
    except QuoteValidationError as e:
        raise HTTPException(status_code=422, detail={"field": e.field, "error": e.message})


@router.post("/payment-request")
async def create_payment_request(body: PaymentRequestIn):
    """Build the create-payment body charging the quoted total."""
    quote = _quote(body)
    try:
        payment = checkout_service.build_payment_request(quote, body.source_id)
    except CheckoutConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "payment": payment.to_gateway_dict(),
        "quote": quote.to_api_dict(),
    }


@router.post("/payment-link")
async def create_payment_link(body: PaymentLinkIn, request: Request):
    """Create a hosted payment page link for the quoted total."""
    quote = _quote(body)
    program = engine.tables.level(quote.level)
    program_name = body.program_name or (program.name if program else None)
    try:
        link = checkout_service.build_payment_link(
            quote,
            description=body.description,
            origin=request.headers.get("origin"),
            customer_email=body.customer_email,
            program_name=program_name,
        )
    except CheckoutConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "paymentLink": link.payment_link,
        "orderId": link.order_id,
        "redirectUrl": link.redirect_url,
        "note": link.note,
        "message": "Payment link created successfully",
    }
