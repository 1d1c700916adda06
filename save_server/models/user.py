# save_server/models/user.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from . import Base


class User(Base):
    """
    A registered account. Rows are written once at registration and never
    updated; `username` is stored trimmed and compared case-sensitively.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(60), nullable=False)

    profiles = relationship("Player", back_populates="owner", order_by="Player.name")

    def __repr__(self):
        return f"<User id={self.id} username={self.username!r}>"
