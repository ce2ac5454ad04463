"""Payment Routes: payment-intent creation for the client-side checkout.

Invariants:
    - Unconfigured provider → PAYMENT_PROVIDER_ERROR (500) with a configuration hint
    - Provider failures → PAYMENT_PROVIDER_ERROR with the provider's message attached
"""

import logging

from fastapi import APIRouter, Depends

from investestate.api.deps import get_payment_gateway
from investestate.core.repository_protocols import PaymentGateway
from investestate.schemas.payment import PaymentIntentRequest, PaymentIntentResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    client_secret = await gateway.create_payment_intent(body.amount)
    logger.info(f"Payment intent created for amount {body.amount}")
    return PaymentIntentResponse(client_secret=client_secret)
