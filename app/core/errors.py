# app/core/errors.py
"""
Доменные ошибки API.

Сервисы бросают их синхронно, обработчик в main.py превращает
в JSON-ответ с нужным статусом.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"
    operational = True

    def __init__(self, message: str = "Internal server error", errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(AppError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    status_code = 401
    error_code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class AuthorizationError(AppError):
    status_code = 403
    error_code = "AUTHORIZATION_ERROR"

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(AppError):
    status_code = 409
    error_code = "CONFLICT_ERROR"

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message)


class PaymentError(AppError):
    status_code = 402
    error_code = "PAYMENT_ERROR"

    def __init__(self, message: str = "Payment processing failed"):
        super().__init__(message)


class ExternalServiceError(AppError):
    status_code = 502
    error_code = "EXTERNAL_SERVICE_ERROR"
    operational = False

    def __init__(self, service: str, message: str = "External service error"):
        super().__init__(f"{service}: {message}")
        self.service = service


def error_payload(exc: AppError) -> dict[str, Any]:
    body: dict[str, Any] = {
        "success": False,
        "status_code": exc.status_code,
        "error_code": exc.error_code,
        "detail": exc.message,
    }
    if exc.errors:
        body["errors"] = exc.errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.operational:
        logger.warning(f"[{exc.error_code}] {request.method} {request.url.path}: {exc.message}")
    else:
        logger.error(f"[{exc.error_code}] {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(error_payload(exc), status_code=exc.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
