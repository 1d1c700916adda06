# save_server/core/sessions.py

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from save_server.config import TOKEN_TTL
from save_server.core.errors import TokenExpired, TokenInvalid


ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    user_id: int
    username: str


class SessionTokens:
    """
    Stateless bearer tokens: an HS256 JWT carrying user id, username,
    issued-at and expiry. Nothing is stored server-side.
    """

    def __init__(self, secret: str, ttl: timedelta = TOKEN_TTL):
        if not secret:
            raise ValueError("signing secret must not be empty")
        self._secret = secret
        self._ttl = ttl

    def issue(self, identity: Identity, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self._ttl
        claims = {
            "sub": str(identity.user_id),
            "user_id": identity.user_id,
            "username": identity.username,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Identity:
        # jose checks the signature before any claim, so a forged token
        # with a past exp is reported as invalid rather than expired
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require_exp": True, "require_iat": True},
            )
        except ExpiredSignatureError:
            raise TokenExpired()
        except JWTError:
            raise TokenInvalid()

        user_id = payload.get("user_id")
        username = payload.get("username")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str):
            raise TokenInvalid()
        return Identity(user_id=user_id, username=username)
