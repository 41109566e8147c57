# api/dependencies.py
"""FastAPI authentication dependency."""
import secrets

from fastapi import Request

from api.errors import ForbiddenError


async def verify_admin_key(request: Request) -> None:
    """Verify the admin key provided in the X-Admin-Key header.

    An unset ADMIN_KEY rejects every request.

    Raises:
        ForbiddenError: If the key is missing or invalid (403).
    """
    expected_key = request.app.state.settings.ADMIN_KEY
    provided_key = request.headers.get("X-Admin-Key")
    if not expected_key or not provided_key or not secrets.compare_digest(provided_key, expected_key):
        raise ForbiddenError()
