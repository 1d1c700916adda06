# save_server/models/player.py

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from . import Base


# -------------------------------
# Player Profile Model
# -------------------------------

class Player(Base):
    """
    One saved profile per (user_id, name). `data` only ever holds the
    iv:tag:ciphertext record produced by ProfileCipher.
    """
    __tablename__ = "players"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_players_user_name"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    name = Column(String(32), nullable=False)
    data = Column(Text, nullable=False)

    owner = relationship("User", back_populates="profiles")
