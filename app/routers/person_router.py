from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import OpenidGateRoute, get_current_openid
from app.core import person_store
from app.core.errors import envelope
from app.database import get_db
from app.models.person import Person
from app.schemas.person_schema import (
    PersonCreate,
    PersonOut,
    PersonSyncRequest,
    PersonUpdate,
)


router = APIRouter(prefix="/api/persons", tags=["Persons"], route_class=OpenidGateRoute)


def serialize_person(person: Person) -> dict:
    return PersonOut.model_validate(person).model_dump(mode="json")


# --------------------------------------------------
# LIST MY PERSONS
# --------------------------------------------------
@router.get("")
def list_persons(
    db: Session = Depends(get_db),
    openid: str = Depends(get_current_openid),
):
    persons = person_store.list_persons(db, openid)
    return envelope(data=[serialize_person(p) for p in persons])


# --------------------------------------------------
# CREATE PERSON
# --------------------------------------------------
@router.post("")
def create_person(
    payload: PersonCreate,
    db: Session = Depends(get_db),
    openid: str = Depends(get_current_openid),
):
    person = person_store.create_person(db, openid, payload)
    return envelope(data=serialize_person(person))


# --------------------------------------------------
# FULL SYNC (client graph replaces server registry)
# declared before /{person_id} so "sync" is not read as an id
# --------------------------------------------------
@router.post("/sync")
def sync_persons(
    payload: PersonSyncRequest,
    db: Session = Depends(get_db),
    openid: str = Depends(get_current_openid),
):
    persons = person_store.sync_persons(db, openid, payload.persons)
    return envelope(data=[serialize_person(p) for p in persons])


# --------------------------------------------------
# GET ONE
# --------------------------------------------------
@router.get("/{person_id}")
def get_person(
    person_id: str,
    db: Session = Depends(get_db),
    openid: str = Depends(get_current_openid),
):
    person = person_store.get_person(db, openid, person_id)
    return envelope(data=serialize_person(person))


# --------------------------------------------------
# UPDATE (sparse)
# --------------------------------------------------
@router.put("/{person_id}")
def update_person(
    person_id: str,
    payload: PersonUpdate,
    db: Session = Depends(get_db),
    openid: str = Depends(get_current_openid),
):
    person = person_store.update_person(db, openid, person_id, payload)
    return envelope(data=serialize_person(person))


# --------------------------------------------------
# DELETE
# --------------------------------------------------
@router.delete("/{person_id}")
def delete_person(
    person_id: str,
    db: Session = Depends(get_db),
    openid: str = Depends(get_current_openid),
):
    person_store.delete_person(db, openid, person_id)
    return envelope(message="deleted")
