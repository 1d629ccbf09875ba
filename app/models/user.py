from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime

from app.database import Base


class User(Base):
    """
    A mini-program user, keyed by the platform openid.
    Created on first login, never updated afterwards.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    openid = Column(String(64), unique=True, index=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
