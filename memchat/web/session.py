"""Per-browser session cookie holding an opaque user id."""

import logging
import re
import uuid

from aiohttp import web

from memchat.config import settings

logger = logging.getLogger(__name__)

# Far-future expiry; the id is assigned once and kept.
COOKIE_EXPIRES = "Fri, 31 Dec 9999 00:00:00 GMT"

_VALID_USER_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def new_user_id() -> str:
    return uuid.uuid4().hex


def read_user_id(request: web.Request) -> str | None:
    """Return the user id from the session cookie, or None if absent or malformed."""
    value = request.cookies.get(settings.session_cookie_name, "")
    if value and _VALID_USER_ID.match(value):
        return value
    if value:
        logger.warning("Ignoring malformed session cookie")
    return None


def ensure_user_id(request: web.Request) -> tuple[str, bool]:
    """Return ``(user_id, created)``, assigning a fresh id if the browser has none."""
    user_id = read_user_id(request)
    if user_id is not None:
        return user_id, False
    user_id = new_user_id()
    logger.info("Assigned new session user id %s", user_id)
    return user_id, True


def commit_session(response: web.StreamResponse, user_id: str) -> None:
    """Attach the session cookie to *response*."""
    response.set_cookie(
        settings.session_cookie_name,
        user_id,
        expires=COOKIE_EXPIRES,
        path="/",
        httponly=True,
        samesite="Lax",
    )
