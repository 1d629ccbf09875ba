import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from app.config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(url, pool_pre_ping=True, pool_recycle=3600)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    One session per request. Rolled back if the handler raises.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind=None):
    # Import models so SQLAlchemy registers tables
    from app.models import counter, person, user  # noqa: F401

    bind = bind or engine
    logger.info(
        "Creating tables on %s",
        bind.url.render_as_string(hide_password=True),
    )
    Base.metadata.create_all(bind=bind)
