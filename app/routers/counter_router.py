from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.core import counter_store
from app.core.errors import envelope
from app.database import get_db


router = APIRouter(prefix="/api/count", tags=["Counter"])


@router.post("")
def update_count(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
):
    # any JSON is accepted; only {"action": "inc" | "clear"} changes the count
    action = payload.get("action") if isinstance(payload, dict) else None

    if action == "inc":
        count = counter_store.increment(db)
    elif action == "clear":
        count = counter_store.clear(db)
    else:
        count = counter_store.get_count(db)

    return envelope(data=count)


@router.get("")
def get_count(db: Session = Depends(get_db)):
    return envelope(data=counter_store.get_count(db))
