"""
auth/dependencies.py -- Bearer-token resolution and FastAPI Depends() helpers.

resolve_credential() is the whole auth decision as a plain function: it takes
the raw Authorization header value and either returns a User or raises one
AuthError subclass. There is no third outcome.

  header absent / empty           -> MissingCredential
  not exactly "Bearer <token>"    -> MalformedCredential
  token unknown (or past max age) -> InvalidToken
  token's user no longer exists   -> UnknownIdentity

get_current_user() wires that function into FastAPI: it pulls the session
registry and user store from app.state and attaches the resolved User to
request.state for downstream handlers.

Layer rule: no imports from api/ or alerts/.
  This module may import from fastapi because it is part of the FastAPI
  dependency injection system.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable

from fastapi import Request

from auth.models import User
from core.config import get_settings
from core.errors import InvalidToken, MalformedCredential, MissingCredential, UnknownIdentity

if TYPE_CHECKING:
    from auth.sessions import SessionRegistry
    from auth.store import UserStore

_SCHEME = "bearer"


def parse_bearer(header: str | None) -> str:
    """Extract the token from an Authorization header value.

    The scheme is matched case-insensitively (RFC 7235). Anything other than
    exactly two space-separated parts with a non-empty token is malformed.
    """
    if not header:
        raise MissingCredential()
    parts = header.split(" ")
    if len(parts) != 2 or parts[0].lower() != _SCHEME or not parts[1]:
        raise MalformedCredential()
    return parts[1]


def resolve_credential(
    header: str | None,
    sessions: SessionRegistry,
    user_store: UserStore,
    max_age_seconds: int = 0,
    clock: Callable[[], float] = time.time,
) -> User:
    """Resolve a raw Authorization header value to a User or raise AuthError.

    max_age_seconds > 0 applies a lifetime policy on top of the registry:
    sessions older than that are revoked and reported as InvalidToken.
    """
    token = parse_bearer(header)
    session = sessions.get(token)
    if session is None:
        raise InvalidToken()
    if max_age_seconds > 0 and clock() - session.created_at > max_age_seconds:
        sessions.revoke(token)
        raise InvalidToken()
    user = user_store.get_by_id(session.user_id)
    if user is None:
        raise UnknownIdentity()
    return user


def get_current_user(request: Request) -> User:
    """Require a valid bearer token. Raises AuthError (-> 401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    user = resolve_credential(
        request.headers.get("Authorization"),
        request.app.state.sessions,
        request.app.state.user_store,
        max_age_seconds=get_settings().session_max_age_seconds,
    )
    request.state.user = user
    return user


def get_current_token(request: Request) -> str:
    """Authenticate the request and return the bearer token it presented.

    Used by logout, which needs the token itself to revoke it.
    """
    get_current_user(request)
    return parse_bearer(request.headers.get("Authorization"))
