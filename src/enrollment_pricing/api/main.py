import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from enrollment_pricing.engine import QuoteValidationError
from enrollment_pricing.engine.formatting import format_cents
from enrollment_pricing.api.checkout_api import router as checkout_router
from enrollment_pricing.api.state import engine, settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Enrollment Pricing API",
    description="Quote and checkout hand-off API for tutoring session packages",
    version="1.0.0"
)

# Any localhost port is allowed for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(checkout_router)

if settings.is_production:
    logger.info("Running in PRODUCTION mode, payments are real")
else:
    logger.info("Running in SANDBOX mode, payments are test payments")
if not settings.square_configured:
    logger.warning("SQUARE_ACCESS_TOKEN / SQUARE_LOCATION_ID not set, payments cannot be created")


class QuoteIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    level: str
    sessions: int
    promo_code: Optional[str] = Field(default=None, alias="promoCode")
    currency: Optional[str] = None


def quote_to_response(result) -> dict:
    """Quote wire shape plus display fields."""
    body = result.to_api_dict()
    body["formattedTotal"] = format_cents(result.total_cents, result.currency)
    body["promoApplied"] = result.promo_code
    body["warnings"] = result.warnings
    return body


@app.get("/")
async def root():
    return {
        "status": "online",
        "message": "Enrollment Pricing API Active",
        "endpoints": {
            "health": "/api/health",
            "programs": "/api/programs",
            "quote": "/api/quote",
            "paymentRequest": "/api/checkout/payment-request",
            "paymentLink": "/api/checkout/payment-link",
        },
    }


@app.get("/api/health")
async def health():
    return {
        "ok": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "squareConfigured": settings.square_configured,
        "environment": settings.square_environment,
        "production": settings.is_production,
        "warnings": {
            "missingAccessToken": not settings.square_access_token,
            "missingLocationId": not settings.square_location_id,
            "notProduction": not settings.is_production,
        },
    }


@app.get("/api/programs")
async def list_programs():
    tables = engine.tables
    return {
        "defaultLevel": tables.default_level,
        "levels": [
            {
                "id": level.level_id,
                "name": level.name,
                "description": level.description,
                "baseCents": level.base_cents,
                "formattedBase": format_cents(level.base_cents, engine.default_currency),
            }
            for level in tables.levels.values()
        ],
        "packages": [
            {
                "sessions": terms.sessions,
                "discountPct": terms.discount_pct,
                "expiryDays": terms.expiry_days,
            }
            for terms in sorted(tables.packages.values(), key=lambda t: t.sessions)
        ],
    }


@app.post("/api/quote")
async def create_quote(req: QuoteIn):
    try:
        result = engine.quote(req.level, req.sessions, req.promo_code, req.currency)
    except QuoteValidationError as e:
        raise HTTPException(status_code=422, detail={"field": e.field, "error": e.message})
    return quote_to_response(result)
