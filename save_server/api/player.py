# save_server/api/player.py

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from save_server.api.auth import get_current_user
from save_server.core.profiles import ProfileStore
from save_server.core.sessions import Identity
from save_server.database import get_db


router = APIRouter()


def get_profile_store(request: Request, db: Session = Depends(get_db)) -> ProfileStore:
    return ProfileStore(db, request.app.state.cipher)


# -------------------------------
# Profile Endpoints
# -------------------------------
# `current_user` is declared first so authentication is resolved
# before the profile store is built. `name` is a path parameter so a
# decoded "/" still reaches the normalizer and is rejected there.

@router.post("/player/{name:path}")
def save_player(
    name: str,
    current_user: Identity = Depends(get_current_user),
    payload: dict[str, Any] | None = Body(default=None),
    store: ProfileStore = Depends(get_profile_store),
):
    """
    Creates or overwrites the caller's profile. Unusable money/level
    values fall back to 0 and 1.
    """
    payload = payload or {}
    store.save(current_user.user_id, name, payload.get("money"), payload.get("level"))
    return {"success": True}


@router.get("/player/{name:path}")
def load_player(
    name: str,
    current_user: Identity = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    return store.load(current_user.user_id, name)


@router.get("/players", response_model=list[str])
def list_players(
    current_user: Identity = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    return store.list_names(current_user.user_id)


@router.delete("/player/{name:path}")
def delete_player(
    name: str,
    current_user: Identity = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    deleted = store.delete(current_user.user_id, name)
    return {"success": True, "deleted": deleted}
