"""
Registry storage: every function takes the request's Session explicitly
and every Person query is filtered by the caller's openid.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.core.errors import Conflict, Internal, InvalidInput, NotFound
from app.models.person import Person
from app.models.user import User
from app.schemas.person_schema import (
    PersonCreate,
    PersonSyncItem,
    PersonUpdate,
)

logger = logging.getLogger(__name__)


# request field -> column
FIELD_COLUMNS = {
    "path": "path",
    "pathLabel": "path_label",
    "name": "name",
    "rank": "rank",
    "status": "status",
    "maritalStatus": "marital_status",
    "photoPath": "photo_path",
    "traits": "traits",
    "contact": "contact",
}

NON_NULLABLE_FIELDS = {"path", "name", "rank"}


def derive_path_label(path: Iterable[str], joiner: Optional[str] = None) -> str:
    """
    ["mother", "brother"] -> "mother的brother"
    """
    if joiner is None:
        joiner = settings.PATH_LABEL_JOINER
    return joiner.join(str(step) for step in path)


def _commit(db: Session):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.exception("Constraint violation on commit")
        raise Internal(str(e.orig))
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Commit failed")
        raise Internal(str(e))


def _new_person(openid: str, item) -> Person:
    path = list(item.path or [])

    return Person(
        openid=openid,
        id=item.id,
        path=path,
        path_label=item.pathLabel or derive_path_label(path),
        name=item.name,
        rank=item.rank if item.rank is not None else 1,
        status=item.status or "living",
        marital_status=item.maritalStatus or "",
        photo_path=item.photoPath or "",
        traits=item.traits or "",
        contact=item.contact or "",
    )


def _find_person(db: Session, openid: str, person_id: str) -> Optional[Person]:
    return (
        db.query(Person)
        .filter(Person.openid == openid, Person.id == person_id)
        .first()
    )


# --------------------------------------------------
# USERS
# --------------------------------------------------
def ensure_user(db: Session, openid: str) -> User:
    """
    Find-or-create the user row. A concurrent login that inserts first
    trips the unique index; the row is then simply re-read.
    """
    user = db.query(User).filter(User.openid == openid).first()
    if user:
        return user

    db.add(User(openid=openid))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        user = db.query(User).filter(User.openid == openid).first()
        if user is None:
            raise Internal("用户创建失败")
        return user
    except SQLAlchemyError as e:
        db.rollback()
        raise Internal(str(e))

    logger.info("Registered new user %s", openid)
    return db.query(User).filter(User.openid == openid).one()


# --------------------------------------------------
# READ
# --------------------------------------------------
def list_persons(db: Session, openid: str) -> List[Person]:
    return (
        db.query(Person)
        .filter(Person.openid == openid)
        .order_by(Person.created_at.asc(), Person.pk.asc())
        .all()
    )


def get_person(db: Session, openid: str, person_id: str) -> Person:
    person = _find_person(db, openid, person_id)
    if not person:
        raise NotFound()
    return person


# --------------------------------------------------
# WRITE
# --------------------------------------------------
def create_person(db: Session, openid: str, payload: PersonCreate) -> Person:
    ensure_user(db, openid)

    if _find_person(db, openid, payload.id):
        raise Conflict()

    person = _new_person(openid, payload)
    db.add(person)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # a racing create for the same id loses on the unique constraint
        if _find_person(db, openid, payload.id):
            raise Conflict()
        logger.exception("Create failed for %s", openid)
        raise Internal(str(e.orig))
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Create failed for %s", openid)
        raise Internal(str(e))

    db.refresh(person)

    logger.info("Created person %s for %s", person.id, openid)
    return person


def update_person(
    db: Session,
    openid: str,
    person_id: str,
    payload: PersonUpdate,
) -> Person:
    person = get_person(db, openid, person_id)

    # keys absent from the body stay untouched
    changes = payload.model_dump(exclude_unset=True)

    for field, value in changes.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            raise InvalidInput(f"{field} 不能为空")

    for field, value in changes.items():
        setattr(person, FIELD_COLUMNS[field], value)

    _commit(db)
    db.refresh(person)

    logger.info(
        "Updated person %s for %s (%s)",
        person_id,
        openid,
        ", ".join(sorted(changes)) or "no fields",
    )
    return person


def delete_person(db: Session, openid: str, person_id: str) -> None:
    person = get_person(db, openid, person_id)

    db.delete(person)
    _commit(db)

    logger.info("Deleted person %s for %s", person_id, openid)


def sync_persons(
    db: Session,
    openid: str,
    items: List[PersonSyncItem],
) -> List[Person]:
    """
    Replace the whole registry with `items`, in order.

    The delete and the inserts share one transaction, so a failure part
    way through leaves the previous registry in place.
    """
    ensure_user(db, openid)

    try:
        removed = (
            db.query(Person)
            .filter(Person.openid == openid)
            .delete()
        )

        created = []
        for item in items:
            person = _new_person(openid, item)
            db.add(person)
            # flush per row so created_at / pk follow input order
            db.flush()
            created.append(person)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Sync failed for %s", openid)
        raise Internal(str(e))

    _commit(db)

    for person in created:
        db.refresh(person)

    logger.info(
        "Synced registry for %s: removed %d, inserted %d",
        openid,
        removed,
        len(created),
    )
    return created
