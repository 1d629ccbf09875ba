from pydantic import BaseModel


class LoginOut(BaseModel):
    openid: str
