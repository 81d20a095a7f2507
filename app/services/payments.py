# app/services/payments.py
"""
Stripe PaymentIntents через REST API.
Документация: https://stripe.com/docs/api/payment_intents

Настройка: STRIPE_SECRET_KEY=sk_... в .env
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from app.core.config import settings
from app.core.errors import ExternalServiceError, PaymentError

logger = logging.getLogger(__name__)


class StripeGateway:
    def __init__(self, secret_key: str | None, base_url: str = "https://api.stripe.com/v1", timeout: float = 15):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        if not self.secret_key:
            raise ExternalServiceError("Stripe", "STRIPE_SECRET_KEY is not configured")
        return {"Authorization": f"Bearer {self.secret_key}"}

    def _handle(self, r: httpx.Response) -> dict:
        try:
            data = r.json()
        except ValueError:
            data = {}
        if r.status_code >= 400:
            message = (data.get("error") or {}).get("message") or f"HTTP {r.status_code}"
            logger.error(f"Stripe error {r.status_code}: {message}")
            raise PaymentError(message)
        return data

    def create_payment_intent(self, amount: int, currency: str, user_id: str | int | None = None) -> dict:
        form = {
            "amount": str(int(round(amount))),
            "currency": currency.lower(),
            "metadata[userId]": str(user_id or "guest"),
            "metadata[timestamp]": datetime.now(timezone.utc).isoformat(),
        }
        try:
            r = httpx.post(
                f"{self.base_url}/payment_intents",
                data=form,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Stripe create intent failed: {e}")
            raise PaymentError(str(e) or "Failed to create payment intent")
        return self._handle(r)

    def retrieve_payment_intent(self, intent_id: str) -> dict:
        try:
            r = httpx.get(
                f"{self.base_url}/payment_intents/{intent_id}",
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Stripe retrieve intent {intent_id} failed: {e}")
            raise PaymentError(str(e) or "Failed to retrieve payment")
        return self._handle(r)


def get_payment_gateway() -> StripeGateway:
    return StripeGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_API_BASE)
