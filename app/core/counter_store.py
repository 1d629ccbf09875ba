from sqlalchemy.orm import Session

from app.models.counter import Counter


def get_count(db: Session) -> int:
    return db.query(Counter).count()


def increment(db: Session) -> int:
    db.add(Counter())
    db.commit()
    return get_count(db)


def clear(db: Session) -> int:
    db.query(Counter).delete()
    db.commit()
    return get_count(db)
