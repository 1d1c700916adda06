# save_server/core/profiles.py

import json
import logging
import math

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from save_server.core.cipher import ProfileCipher, TamperOrCorruption
from save_server.core.errors import IntegrityFailure, Internal, InvalidName, NotFound
from save_server.core.names import normalize_name
from save_server.models.player import Player


logger = logging.getLogger(__name__)

DEFAULT_MONEY = 0
DEFAULT_LEVEL = 1

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def coerce_number(value, default: int) -> int:
    """
    Lenient numeric parsing for save payloads: ints, finite floats and
    numeric strings are accepted (truncated to int), anything else is the default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return default


def _require_name(raw_name) -> str:
    name = normalize_name(raw_name)
    if name is None:
        raise InvalidName()
    return name


class ProfileStore:
    """
    Encrypted player profiles keyed by (user_id, normalized name).
    Every query carries user_id in its predicate.
    """

    def __init__(self, db: Session, cipher: ProfileCipher):
        self.db = db
        self.cipher = cipher

    # -------------------------------
    # Write Paths
    # -------------------------------

    def save(self, user_id: int, raw_name, money=None, level=None) -> str:
        name = _require_name(raw_name)
        record = {
            "money": coerce_number(money, DEFAULT_MONEY),
            "level": coerce_number(level, DEFAULT_LEVEL),
        }
        blob = self.cipher.encrypt(json.dumps(record).encode("utf-8"))

        try:
            self.db.execute(self._upsert(user_id, name, blob))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Save failed for user_id=%s name=%r", user_id, name)
            raise Internal()

        logger.info("Saved profile: user_id=%s name=%s", user_id, name)
        return name

    def delete(self, user_id: int, raw_name) -> str:
        name = _require_name(raw_name)

        try:
            deleted = (
                self.db.query(Player)
                .filter(Player.user_id == user_id, Player.name == name)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Delete failed for user_id=%s name=%r", user_id, name)
            raise Internal()

        if deleted == 0:
            raise NotFound()

        logger.info("Deleted profile: user_id=%s name=%s", user_id, name)
        return name

    # -------------------------------
    # Read Paths
    # -------------------------------

    def load(self, user_id: int, raw_name) -> dict:
        name = _require_name(raw_name)

        try:
            row = (
                self.db.query(Player.data)
                .filter(Player.user_id == user_id, Player.name == name)
                .first()
            )
        except SQLAlchemyError:
            logger.exception("Load failed for user_id=%s name=%r", user_id, name)
            raise Internal()

        if row is None:
            raise NotFound()

        try:
            record = json.loads(self.cipher.decrypt(row.data))
        except (TamperOrCorruption, ValueError) as e:
            logger.error("Decryption error for user_id=%s name=%s: %s", user_id, name, e)
            raise IntegrityFailure()

        if not _is_profile_record(record):
            logger.error("Malformed profile record for user_id=%s name=%s", user_id, name)
            raise IntegrityFailure()

        return {"money": record["money"], "level": record["level"]}

    def list_names(self, user_id: int) -> list[str]:
        try:
            rows = (
                self.db.query(Player.name)
                .filter(Player.user_id == user_id)
                .all()
            )
        except SQLAlchemyError:
            logger.exception("List failed for user_id=%s", user_id)
            raise Internal()

        return sorted(row.name for row in rows)

    def _upsert(self, user_id: int, name: str, blob: str):
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise Internal("Unsupported database dialect: %s" % dialect)

        stmt = insert(Player).values(user_id=user_id, name=name, data=blob)
        return stmt.on_conflict_do_update(
            index_elements=["user_id", "name"],
            set_={"data": stmt.excluded.data},
        )


def _is_profile_record(record) -> bool:
    if not isinstance(record, dict):
        return False
    for key in ("money", "level"):
        value = record.get(key)
        if not isinstance(value, int) or isinstance(value, bool):
            return False
    return True
