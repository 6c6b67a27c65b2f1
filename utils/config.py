"""
Configuration management.
"""

import os
import secrets
from dataclasses import dataclass, field
from typing import List, Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes", "on")


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "4000")))
    debug: bool = field(default_factory=lambda: _env_flag("DEBUG"))
    is_production: bool = field(
        default_factory=lambda: os.getenv("RAILWAY_ENVIRONMENT") is not None or _env_flag("PRODUCTION")
    )
    allowed_origins: List[str] = field(default_factory=lambda: _env_list("ALLOWED_ORIGINS"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Data
    data_path: Optional[str] = field(default_factory=lambda: os.getenv("DATA_PATH") or None)
    max_id_attempts: int = field(default_factory=lambda: int(os.getenv("MAX_ID_ATTEMPTS", "10000")))

    # Auth
    # Without SESSION_SECRET tokens do not survive a restart
    session_secret: str = field(
        default_factory=lambda: os.getenv("SESSION_SECRET") or secrets.token_hex(32)
    )
    token_hours: int = field(default_factory=lambda: int(os.getenv("TOKEN_HOURS", "8")))
    admin_password_hash: Optional[str] = field(
        default_factory=lambda: os.getenv("ADMIN_PASSWORD_HASH") or None
    )
    user_password_hash: Optional[str] = field(
        default_factory=lambda: os.getenv("USER_PASSWORD_HASH") or None
    )

    def __post_init__(self):
        if not self.allowed_origins and not self.is_production:
            # Development fallback only
            self.allowed_origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
        # Debug mode is never enabled in production
        if self.is_production:
            self.debug = False

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary. Secrets are omitted."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "is_production": self.is_production,
            "allowed_origins": list(self.allowed_origins),
            "log_level": self.log_level,
            "data_path": self.data_path,
            "max_id_attempts": self.max_id_attempts,
            "token_hours": self.token_hours,
        }
