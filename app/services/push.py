# app/services/push.py
"""
Pushy push-уведомления.
Документация: https://pushy.me/docs/api/send-notifications

Настройка: PUSHY_API_KEY в .env
"""
from __future__ import annotations

import logging

import httpx

from app.core.config import settings
from app.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class PushyGateway:
    def __init__(self, api_key: str | None, base_url: str = "https://api.pushy.me", timeout: float = 15):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def send(self, token: str, title: str, body: str) -> dict:
        """Отправляет одно уведомление на одно устройство."""
        if not self.api_key:
            raise ExternalServiceError("Pushy", "PUSHY_API_KEY is not configured")

        payload = {
            "to": token,
            "data": {"message": body},
            "notification": {"badge": 1, "sound": "ping.aiff", "title": title, "body": body},
        }
        try:
            r = httpx.post(
                f"{self.base_url}/push",
                params={"api_key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Pushy send error to {token}: {e}")
            raise ExternalServiceError("Pushy", str(e))

        if r.status_code != 200 or not data.get("success"):
            logger.error(f"Pushy rejected push to {token}: {data}")
            raise ExternalServiceError("Pushy", data.get("error") or f"HTTP {r.status_code}")
        return {"id": data.get("id"), "token": token}

    def send_many(self, tokens: list[str], title: str, body: str) -> list[dict]:
        return [self.send(t, title, body) for t in tokens]


def get_push_gateway() -> PushyGateway:
    return PushyGateway(settings.PUSHY_API_KEY, settings.PUSHY_API_BASE)
