"""Cookie-backed session identity helpers.

A session is nothing more than an opaque token stored in a cookie. It is the
partition key for every ledger row; it is not a credential.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Mapping, Union

from starlette.responses import Response

from ..errors import UnauthorizedError
from .config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionGranted:
    """The request presented a usable session token."""

    session_id: str


@dataclass(frozen=True, slots=True)
class SessionDenied:
    """The request carried no usable session token."""

    reason: str


SessionCheck = Union[SessionGranted, SessionDenied]


def check_session(cookies: Mapping[str, str], cookie_name: str) -> SessionCheck:
    """Inspect request cookies for a session token."""

    raw = cookies.get(cookie_name)
    if raw is None:
        return SessionDenied(reason=f"Missing '{cookie_name}' cookie.")
    if not raw.strip():
        return SessionDenied(reason=f"Empty '{cookie_name}' cookie.")
    return SessionGranted(session_id=raw)


def require_session(cookies: Mapping[str, str], settings: Settings) -> str:
    """Return the caller's session id or raise ``UnauthorizedError``."""

    result = check_session(cookies, settings.session_cookie_name)
    if isinstance(result, SessionDenied):
        logger.warning("Session check failed", extra={"reason": result.reason})
        raise UnauthorizedError(details={"reason": result.reason})
    return result.session_id


def generate_session_id() -> str:
    return str(uuid.uuid4())


def resolve_session(
    cookies: Mapping[str, str],
    response: Response,
    settings: Settings,
) -> str:
    """Reuse the caller's session or mint a new one and set its cookie."""

    result = check_session(cookies, settings.session_cookie_name)
    if isinstance(result, SessionGranted):
        return result.session_id

    session_id = generate_session_id()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_cookie_max_age,
        path=settings.session_cookie_path,
        httponly=settings.session_cookie_httponly,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_same_site,  # type: ignore[arg-type]
    )
    logger.info("Started new session", extra={"session_id": session_id})
    return session_id


__all__ = [
    "SessionCheck",
    "SessionDenied",
    "SessionGranted",
    "check_session",
    "generate_session_id",
    "require_session",
    "resolve_session",
]
