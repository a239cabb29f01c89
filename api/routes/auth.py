"""
api/routes/auth.py -- Registration and login endpoints.

Routes:
  POST /api/auth/register  -- create account; returns {user, token}
  POST /api/auth/login     -- email/password login; returns {user, token}

There is no logout route: tokens are not tracked server-side, so logging out
is the client discarding its token.

Security:
  Both routes are rate-limited per client IP (Settings.register_rate_limit,
  Settings.login_rate_limit).
  authenticate_user() provides timing equalization -- use it, never inline.
  Cache-Control: no-store on every response that carries a token.
  Wrong email and wrong password get the same 401 message.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response
from sqlalchemy.exc import IntegrityError

from api.limiter import limiter
from api.models import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from auth.store import UserStore
from auth.tokens import authenticate_user, create_access_token, register_user
from core.config import get_settings

logger = logging.getLogger("taskdash.api")

_settings = get_settings()

# Auth policy:
# - POST /api/auth/register: public
# - POST /api/auth/login:    public
router = APIRouter()


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
@limiter.limit(_settings.register_rate_limit)
def register(request: Request, response: Response, body: RegisterRequest) -> AuthResponse:
    """Create an account and return it with a fresh token.

    The first account ever created is an admin; every later one is a member.
    A duplicate email (compared case-insensitively) is a 409.
    """
    user_store: UserStore = request.app.state.user_store
    try:
        user = register_user(user_store, body.email, body.password, body.full_name)
    except IntegrityError as exc:
        raise HTTPException(
            status_code=409,
            detail={"code": "conflict", "message": "User with this email already exists."},
        ) from exc

    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(user=UserResponse.from_user(user), token=create_access_token(user.id))


@router.post("/auth/login", response_model=AuthResponse)
@limiter.limit(_settings.login_rate_limit)
def login(request: Request, response: Response, body: LoginRequest) -> AuthResponse:
    """Authenticate with email and password; return the user and a token."""
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        logger.warning("Failed login attempt from %s", request.client.host if request.client else "unknown")
        raise HTTPException(
            status_code=401,
            detail={"code": "bad_credentials", "message": "Invalid email or password."},
            headers={"Cache-Control": "no-store"},
        )

    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(user=UserResponse.from_user(user), token=create_access_token(user.id))
