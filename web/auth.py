"""
Authentication - Demo Accounts and Signed Bearer Tokens

Implements:
- Password verification against PBKDF2 hashes
- Signed bearer tokens carrying username and role
- FastAPI dependencies resolving the caller's role

Security:
- Passwords hashed with PBKDF2-HMAC-SHA256
- Tokens signed with HMAC-SHA256 and expire after ``Config.token_hours``
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Final, Optional

from fastapi import HTTPException, Request

from utils.config import Config


logger = logging.getLogger(__name__)


# =============================================================================
# Roles and Accounts
# =============================================================================


class UserRole(Enum):
    """Capability level of an authenticated caller."""

    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Account:
    """A login account."""

    username: str
    display_name: str
    role: UserRole
    password_hash: Optional[str]


# Development-only passwords, used when no hash is configured
DEMO_PASSWORDS: Final[dict[str, str]] = {
    "admin": "adminPassword",
    "user": "userPassword",
}

PBKDF2_ITERATIONS: Final[int] = 100000


# =============================================================================
# Password Hashing
# =============================================================================


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """
    Hash a password using PBKDF2-HMAC-SHA256.

    Returns: salt$hash (both hex-encoded)
    """
    if salt is None:
        salt = secrets.token_hex(16)

    hash_bytes = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        PBKDF2_ITERATIONS,
    )
    return f"{salt}${hash_bytes.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored hash."""
    try:
        salt, _ = stored_hash.split("$", 1)
        return hmac.compare_digest(hash_password(password, salt), stored_hash)
    except (ValueError, AttributeError):
        return False


def _resolve_hash(username: str, configured: Optional[str], config: Config) -> Optional[str]:
    if configured:
        return configured
    if config.is_production:
        logger.warning("No password hash configured for %r, account disabled", username)
        return None
    return hash_password(DEMO_PASSWORDS[username])


def build_accounts(config: Config) -> dict[str, Account]:
    """
    Build the account table from configuration.

    Accounts without a configured hash fall back to the demo password
    outside production and are disabled in production.
    """
    return {
        "admin": Account(
            username="admin",
            display_name="Register Administrator",
            role=UserRole.ADMIN,
            password_hash=_resolve_hash("admin", config.admin_password_hash, config),
        ),
        "user": Account(
            username="user",
            display_name="Guest User",
            role=UserRole.USER,
            password_hash=_resolve_hash("user", config.user_password_hash, config),
        ),
    }


def authenticate(accounts: dict[str, Account], username: str, password: str) -> Optional[Account]:
    """
    Check credentials.

    Args:
        accounts: Account table
        username: Login name
        password: Plain text password

    Returns:
        Account if credentials are valid, None otherwise
    """
    account = accounts.get(username)
    if not account or not account.password_hash:
        return None
    if not verify_password(password, account.password_hash):
        return None
    return account


# =============================================================================
# Token Management
# =============================================================================


@dataclass(frozen=True)
class AuthSession:
    """Claims carried by a bearer token."""

    username: str
    role: UserRole
    expires_at: datetime
    session_id: str

    @property
    def is_expired(self) -> bool:
        return datetime.now(timezone.utc) > self.expires_at

    def to_dict(self) -> dict:
        return {
            "sub": self.username,
            "role": self.role.value,
            "exp": self.expires_at.isoformat(),
            "sid": self.session_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuthSession":
        return cls(
            username=data["sub"],
            role=UserRole(data["role"]),
            expires_at=datetime.fromisoformat(data["exp"]),
            session_id=data["sid"],
        )


def create_session(account: Account, hours: int) -> AuthSession:
    """Create a session for an authenticated account."""
    return AuthSession(
        username=account.username,
        role=account.role,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=hours),
        session_id=secrets.token_hex(16),
    )


def _signature(payload_b64: str, secret: str) -> str:
    return hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).hexdigest()


def sign_token(session: AuthSession, secret: str) -> str:
    """
    Sign and encode a session as a bearer token.

    Format: base64(json_payload).signature
    """
    payload = json.dumps(session.to_dict(), separators=(",", ":"))
    payload_b64 = base64.urlsafe_b64encode(payload.encode()).decode()
    return f"{payload_b64}.{_signature(payload_b64, secret)}"


def verify_token(token: str, secret: str) -> Optional[AuthSession]:
    """
    Verify and decode a bearer token.

    Returns AuthSession if valid and not expired, None otherwise.
    """
    try:
        payload_b64, signature = token.rsplit(".", 1)

        if not hmac.compare_digest(signature, _signature(payload_b64, secret)):
            return None

        payload = base64.urlsafe_b64decode(payload_b64.encode()).decode()
        session = AuthSession.from_dict(json.loads(payload))

        if session.is_expired:
            return None

        return session

    except (ValueError, KeyError, TypeError, json.JSONDecodeError):
        return None


# =============================================================================
# FastAPI Dependencies
# =============================================================================


def get_current_user(request: Request) -> AuthSession:
    """
    Dependency resolving the caller from the Authorization header.

    Raises HTTPException(401) if the token is missing or invalid.
    """
    header = request.headers.get("Authorization", "")
    token = header[len("Bearer "):] if header.startswith("Bearer ") else ""
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")

    session = verify_token(token, request.app.state.config.session_secret)
    if not session:
        raise HTTPException(status_code=401, detail="Invalid token")
    return session


def authorize(request: Request) -> UserRole:
    """Return the authenticated caller's role."""
    return get_current_user(request).role


def require_admin(request: Request) -> UserRole:
    """
    Dependency that requires an admin caller.

    Raises HTTPException(401) without a valid token, 403 for other roles.
    """
    role = authorize(request)
    if role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin role required")
    return role
