# save_server/api/auth.py

from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from save_server.core.credentials import CredentialStore
from save_server.core.errors import TokenInvalid, Unauthorized
from save_server.core.sessions import Identity, SessionTokens
from save_server.database import get_db


router = APIRouter(prefix="/auth")


class Credentials(BaseModel):
    username: str | None = None
    password: str | None = None


class Token(BaseModel):
    token: str


class User(BaseModel):
    user_id: int
    username: str


# -------------------------------
# Dependencies
# -------------------------------

def get_credential_store(request: Request, db: Session = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db, request.app.state.pwd_context)


def get_session_tokens(request: Request) -> SessionTokens:
    return request.app.state.session_tokens


def get_current_user(
    authorization: str | None = Header(default=None),
    tokens: SessionTokens = Depends(get_session_tokens),
) -> Identity:
    """
    Resolves `Authorization: Bearer <token>` to the caller's identity.
    Every profile route depends on this before touching storage.
    """
    if not authorization:
        raise Unauthorized("Missing token")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise TokenInvalid("Invalid auth header")

    return tokens.verify(parts[1])


# -------------------------------
# Auth Endpoints
# -------------------------------

@router.post("/register")
def register(body: Credentials, store: CredentialStore = Depends(get_credential_store)):
    store.register(body.username, body.password)
    return {"success": True}


@router.post("/login", response_model=Token)
def login(
    body: Credentials,
    store: CredentialStore = Depends(get_credential_store),
    tokens: SessionTokens = Depends(get_session_tokens),
):
    identity = store.verify(body.username, body.password)
    return {"token": tokens.issue(identity)}


@router.get("/me", response_model=User)
def read_users_me(current_user: Identity = Depends(get_current_user)):
    return {"user_id": current_user.user_id, "username": current_user.username}
