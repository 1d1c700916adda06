# save_server/config.py

import logging
import os
import secrets
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

KEY_BYTES = 32
DEFAULT_DATABASE_URL = "sqlite:///./data/app.db"
DEFAULT_BCRYPT_ROUNDS = 12
TOKEN_TTL = timedelta(hours=2)


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, built once at startup and injected into
    the application. Tests construct it directly with fixed secrets.
    """
    encryption_key: bytes
    jwt_secret: str
    database_url: str = DEFAULT_DATABASE_URL
    token_ttl: timedelta = TOKEN_TTL
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    cors_origins: tuple[str, ...] = ("*",)
    service_name: str = "server-saving"
    version: str = "secure-1.2"

    def __post_init__(self):
        if len(self.encryption_key) != KEY_BYTES:
            raise ValueError("encryption_key must be exactly 32 bytes")
        if not self.jwt_secret:
            raise ValueError("jwt_secret must not be empty")

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            encryption_key=load_encryption_key(os.getenv("ENCRYPTION_KEY")),
            jwt_secret=load_jwt_secret(os.getenv("JWT_SECRET")),
            database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )


# -------------------------------
# Secret Loading
# -------------------------------

def load_encryption_key(raw: str | None) -> bytes:
    """
    Parses a 64-hex-character key. A missing or malformed value still lets
    the service start, with a random key that will not survive a restart.
    """
    if not raw:
        key = secrets.token_bytes(KEY_BYTES)
        logger.warning("WARNING: Using RANDOM ENCRYPTION_KEY (data unreadable after restart).")
        logger.warning("Example to put in .env: ENCRYPTION_KEY=%s", secrets.token_hex(KEY_BYTES))
        return key

    try:
        key = bytes.fromhex(raw.strip())
    except ValueError:
        key = b""

    if len(key) != KEY_BYTES:
        logger.warning(
            "INVALID ENCRYPTION_KEY supplied (expected %d hex characters). "
            "Generated a random temporary one; data will be unreadable after restart.",
            KEY_BYTES * 2,
        )
        return secrets.token_bytes(KEY_BYTES)

    return key


def load_jwt_secret(raw: str | None) -> str:
    if raw and raw.strip():
        return raw.strip()

    logger.warning("WARNING: JWT_SECRET not set. Using a random secret; tokens will not survive a restart.")
    return secrets.token_urlsafe(48)
