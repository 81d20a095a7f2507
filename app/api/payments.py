from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.role_guards import RequestContext, require_user
from app.schemas.payment import (
    PaymentConfirmIn,
    PaymentDetailsOut,
    PaymentIntentIn,
    PaymentIntentOut,
    PaymentStatusOut,
)
from app.services.payments import StripeGateway, get_payment_gateway

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/intent", response_model=PaymentIntentOut)
def create_payment_intent(
    payload: PaymentIntentIn,
    ctx: RequestContext = Depends(require_user),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> PaymentIntentOut:
    intent = gateway.create_payment_intent(payload.amount, payload.currency, user_id=ctx.user_id)
    return PaymentIntentOut(client_secret=intent.get("client_secret"), payment_intent_id=intent["id"])


@router.post("/confirm", response_model=PaymentStatusOut)
def confirm_payment(
    payload: PaymentConfirmIn,
    ctx: RequestContext = Depends(require_user),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> PaymentStatusOut:
    intent = gateway.retrieve_payment_intent(payload.payment_intent_id)
    return PaymentStatusOut(status=intent["status"], amount=intent["amount"], currency=intent["currency"])


@router.get("/{payment_intent_id}", response_model=PaymentDetailsOut)
def payment_details(
    payment_intent_id: str,
    ctx: RequestContext = Depends(require_user),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> PaymentDetailsOut:
    intent = gateway.retrieve_payment_intent(payment_intent_id)
    return PaymentDetailsOut(
        id=intent["id"],
        status=intent["status"],
        amount=intent["amount"],
        currency=intent["currency"],
        created=intent.get("created"),
        metadata=intent.get("metadata") or {},
    )
