# api/errors.py
"""API error types and the handlers that render them as `{"error": ...}` envelopes."""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.schemas import ErrorResponse
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)


class APIError(Exception):
    """Base class for all API errors."""

    status_code = 500
    default_message = "failed"

    def __init__(self, message: Optional[str] = None, reply: Optional[str] = None):
        self.message = message or self.default_message
        self.reply = reply
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        body = ErrorResponse(error=self.message, reply=self.reply)
        return JSONResponse(
            status_code=self.status_code,
            content=body.model_dump(exclude_none=True),
        )


class BadRequestError(APIError):
    status_code = 400
    default_message = "bad request"


class ForbiddenError(APIError):
    status_code = 403
    default_message = "forbidden"


class PayloadTooLargeError(APIError):
    status_code = 413
    default_message = "file too large"


class ServiceError(APIError):
    status_code = 500
    default_message = "failed"


def register_error_handlers(app: FastAPI) -> None:
    """Register error handlers with the FastAPI application."""

    @app.exception_handler(APIError)
    async def handle_api_error(request: Request, error: APIError) -> JSONResponse:
        if error.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {error.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {error.message}")
        return error.to_response()
