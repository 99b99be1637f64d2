"""
api/routes/auth.py -- Registration, login, logout, and identity endpoints.

Routes:
  POST /api/register  -- create an account; {ok: true}
  POST /api/login     -- verify password, issue session token
  POST /api/logout    -- revoke the presented token (requires auth)
  GET  /api/me        -- current user's id and email (requires auth)

Security:
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_email() + verify_password().
  Register never logs the caller in and never echoes the digest.
  Cache-Control: no-store on login responses so proxies never cache a token.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from api.models import Credentials, LoginResponse, MeResponse, OkResponse, UserInfo
from auth.dependencies import get_current_token, get_current_user
from auth.models import User
from auth.sessions import SessionRegistry
from auth.store import UserStore
from auth.tokens import authenticate_user, hash_password
from core.errors import DuplicateIdentity, InvalidCredentials

logger = logging.getLogger("alertservice.auth")

router = APIRouter()


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/register", response_model=OkResponse)
def register(request: Request, body: Credentials) -> OkResponse:
    """Create an account from an email and password.

    The get_by_email() pre-check only avoids paying for a bcrypt hash on an
    obvious duplicate. Correctness comes from the store's UNIQUE constraint:
    create_user() raises DuplicateIdentity if a concurrent request won the race.
    """
    user_store: UserStore = request.app.state.user_store
    if user_store.get_by_email(body.email) is not None:
        raise DuplicateIdentity()
    user = user_store.create_user(body.email, hash_password(body.password))
    logger.info("Registered user_id=%s", user.id)
    return OkResponse()


@router.post("/login", response_model=LoginResponse)
def login(request: Request, response: Response, body: Credentials) -> LoginResponse:
    """Exchange an email and password for a session token.

    Wrong email and wrong password produce the same 401 so the endpoint does
    not reveal which emails are registered.
    """
    user_store: UserStore = request.app.state.user_store
    sessions: SessionRegistry = request.app.state.sessions
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        logger.info("Failed login attempt")
        raise InvalidCredentials()
    token = sessions.issue(user.id)
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(token=token, user=UserInfo.from_user(user))


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.post("/logout", response_model=OkResponse)
def logout(request: Request, token: str = Depends(get_current_token)) -> OkResponse:
    """Revoke the session the request was made with."""
    sessions: SessionRegistry = request.app.state.sessions
    sessions.revoke(token)
    return OkResponse()


@router.get("/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Return identity information for the currently authenticated user."""
    return MeResponse(user=UserInfo.from_user(current_user))
