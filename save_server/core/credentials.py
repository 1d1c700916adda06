# save_server/core/credentials.py

import logging

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from save_server.config import DEFAULT_BCRYPT_ROUNDS
from save_server.core.errors import Conflict, Internal, InvalidCredentials, InvalidInput
from save_server.core.sessions import Identity
from save_server.models.user import User


logger = logging.getLogger(__name__)


def make_password_context(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def verify_password(pwd_context: CryptContext, plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(pwd_context: CryptContext, password: str) -> str:
    return pwd_context.hash(password)


def clean_username(username) -> str:
    if not isinstance(username, str):
        return ""
    return username.strip()


class CredentialStore:
    """
    Registration and login against the users table.
    Passwords are only ever handled as bcrypt hashes.
    """

    def __init__(self, db: Session, pwd_context: CryptContext):
        self.db = db
        self.pwd_context = pwd_context

    def register(self, username, password) -> Identity:
        username = clean_username(username)
        if not username or not isinstance(password, str) or not password:
            raise InvalidInput()

        try:
            password_hash = get_password_hash(self.pwd_context, password)
        except ValueError:
            # bcrypt refuses some secrets, e.g. ones containing NUL bytes
            raise InvalidInput("Invalid password")

        try:
            user_exists = self.db.query(User).filter(User.username == username).first()
            if user_exists:
                raise Conflict()

            user = User(username=username, password_hash=password_hash)
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            # lost a race against a concurrent registration of the same name
            self.db.rollback()
            raise Conflict()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Registration failed for username=%r", username)
            raise Internal("Registration error")

        logger.info("Registered user_id=%s username=%r", user.id, user.username)
        return Identity(user_id=user.id, username=user.username)

    def verify(self, username, password) -> Identity:
        username = clean_username(username)
        if not username or not isinstance(password, str) or not password:
            raise InvalidInput()

        try:
            user = self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError:
            logger.exception("Login lookup failed")
            raise InvalidCredentials()

        if user is None:
            # burn the same bcrypt work so unknown users are not distinguishable by timing
            self.pwd_context.dummy_verify()
            raise InvalidCredentials()
        try:
            valid = verify_password(self.pwd_context, password, user.password_hash)
        except ValueError:
            valid = False
        if not valid:
            raise InvalidCredentials()

        return Identity(user_id=user.id, username=user.username)
