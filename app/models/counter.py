# app/models/counter.py
from sqlalchemy import Column, Integer, DateTime
from datetime import datetime
from app.database import Base


class Counter(Base):
    __tablename__ = "counters"

    id = Column(Integer, primary_key=True, autoincrement=True)

    count = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
