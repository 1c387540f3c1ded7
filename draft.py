"""
Draft mode session flag.

Draft mode lives in a cookie holding a JWT signed with the preview secret.
A missing cookie, a bad signature or an unconfigured secret all read as
"draft mode off", so the flag can only be switched on through /api/draft.
"""

import secrets
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlsplit

from fastapi import Request, Response
from jose import JWTError, jwt

from settings import Settings

DRAFT_COOKIE = "draft_mode"
ALGORITHM = "HS256"
DRAFT_SUBJECT = "draft-mode"


def secret_matches(provided: Optional[str], expected: str) -> bool:
    if provided is None:
        return False
    return secrets.compare_digest(provided.encode(), expected.encode())


def is_relative_path(slug: str) -> bool:
    """True for application-relative paths like ``/blog/my-post``."""
    if not slug.startswith("/") or slug.startswith("//") or "\\" in slug:
        return False
    parts = urlsplit(slug)
    return not parts.scheme and not parts.netloc


def create_draft_token(secret: str) -> str:
    to_encode = {"sub": DRAFT_SUBJECT, "iat": int(datetime.now(timezone.utc).timestamp())}
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_draft_token(token: Optional[str], secret: Optional[str]) -> bool:
    if not token or not secret:
        return False
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return False
    return payload.get("sub") == DRAFT_SUBJECT


def enable_draft_mode(response: Response, settings: Settings):
    response.set_cookie(
        DRAFT_COOKIE,
        create_draft_token(settings.preview_secret),
        httponly=True,
        secure=settings.draft_cookie_secure,
        samesite="none" if settings.draft_cookie_secure else "lax",
        path="/",
    )


def disable_draft_mode(response: Response, settings: Settings):
    response.delete_cookie(
        DRAFT_COOKIE,
        httponly=True,
        secure=settings.draft_cookie_secure,
        samesite="none" if settings.draft_cookie_secure else "lax",
        path="/",
    )


def is_draft_mode(request: Request) -> bool:
    """FastAPI dependency: whether this request's session has draft mode on."""
    settings: Settings = request.app.state.settings
    return verify_draft_token(request.cookies.get(DRAFT_COOKIE), settings.preview_secret)
