"""
Identity provider.

Authentication happens upstream: the gateway verifies the session and
forwards the user id in ``settings.AUTH_USER_HEADER``.  This module only
reads it back.  It never rejects a request itself; services decide what
an anonymous caller may do.
"""
from fastapi import Request

from social_api.config import settings


def resolve_current_user(headers) -> str | None:
    """Return the forwarded user id, or None when absent or blank."""
    value = headers.get(settings.AUTH_USER_HEADER)
    if value is None:
        return None
    value = value.strip()
    return value or None


async def get_current_user_id(request: Request) -> str | None:
    return resolve_current_user(request.headers)
