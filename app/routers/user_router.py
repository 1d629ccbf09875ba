from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.auth import OpenidGateRoute, get_current_openid
from app.config import settings
from app.core.errors import envelope
from app.core.person_store import ensure_user
from app.database import get_db
from app.schemas.user_schema import LoginOut


router = APIRouter(prefix="/api", tags=["Users"], route_class=OpenidGateRoute)


# ------------------- LOGIN -------------------
# makes sure a user row exists for the caller

@router.post("/user/login")
def login(
    db: Session = Depends(get_db),
    openid: str = Depends(get_current_openid),
):
    user = ensure_user(db, openid)
    return envelope(data=LoginOut(openid=user.openid).model_dump())


# ------------------- WX OPENID -------------------
# raw passthrough for the mini-program; only answers calls that
# came through the WeChat gateway

@router.get("/wx_openid")
def wx_openid(request: Request):
    if request.headers.get(settings.SOURCE_HEADER):
        return PlainTextResponse(request.headers.get(settings.OPENID_HEADER, ""))
    return PlainTextResponse("")
