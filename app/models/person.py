from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    JSON,
    ForeignKey,
    UniqueConstraint,
)

from app.database import Base


class Person(Base):
    """
    A relative in one user's registry.

    `id` is chosen by the client (e.g. "mom_bro_1") and is only unique
    per owner, so every lookup goes through (openid, id).
    """
    __tablename__ = "persons"
    __table_args__ = (
        UniqueConstraint("openid", "id", name="uq_persons_openid_id"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)

    openid = Column(
        String(64),
        ForeignKey("users.openid"),
        index=True,
        nullable=False,
    )
    id = Column(String(64), nullable=False)

    # relationship steps from the user, root first: ["mother", "brother"]
    path = Column(JSON, nullable=False, default=list)
    path_label = Column(String(255), nullable=True)

    name = Column(String(64), nullable=False)

    # disambiguates several relatives on the same path
    rank = Column(Integer, nullable=False, default=1)

    status = Column(String(32), nullable=True, default="living")
    marital_status = Column(String(32), nullable=True, default="")

    photo_path = Column(String(512), nullable=True, default="")
    traits = Column(Text, nullable=True)
    contact = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
