"""
Auth Routes - Login for the Asset Register API

Routes:
- POST /api/auth/login - Exchange credentials for a bearer token
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from web.auth import authenticate, create_session, sign_token


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    """Login body. Missing values are reported as 400, not 422."""

    username: Optional[str] = None
    password: Optional[str] = None


@router.post("/login")
def login(credentials: LoginRequest, request: Request):
    """
    Authenticate and issue a bearer token.

    Returns:
        token, username, displayName and role
    """
    if not credentials.username or not credentials.password:
        raise HTTPException(status_code=400, detail="username and password are required")

    account = authenticate(
        request.app.state.accounts,
        credentials.username,
        credentials.password,
    )
    if not account:
        logger.warning("Failed login for %r", credentials.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    config = request.app.state.config
    session = create_session(account, config.token_hours)
    return {
        "token": sign_token(session, config.session_secret),
        "username": account.username,
        "displayName": account.display_name,
        "role": account.role.value,
    }
