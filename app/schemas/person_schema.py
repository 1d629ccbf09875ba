from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime


LifeStatus = Literal["living", "deceased", ""]
MaritalStatus = Literal["married", "unmarried", "divorced", "widowed", ""]


# ---------------------------------------------------------
# BASE (optional person fields, shared by create + sync)
# ---------------------------------------------------------
class PersonBase(BaseModel):
    pathLabel: Optional[str] = Field(default=None, max_length=255)
    rank: Optional[int] = None
    status: Optional[LifeStatus] = None
    maritalStatus: Optional[MaritalStatus] = None
    photoPath: Optional[str] = Field(default=None, max_length=512)
    traits: Optional[str] = None
    contact: Optional[str] = Field(default=None, max_length=255)


# ---------------------------------------------------------
# CREATE
# ---------------------------------------------------------
class PersonCreate(PersonBase):
    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=64)
    path: List[str]


# ---------------------------------------------------------
# SYNC
# the client uploads its whole graph; a missing path means root-less
# ---------------------------------------------------------
class PersonSyncItem(PersonBase):
    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=64)
    path: Optional[List[str]] = None


class PersonSyncRequest(BaseModel):
    persons: List[PersonSyncItem]

    @field_validator("persons")
    @classmethod
    def ids_must_be_unique(cls, persons: List[PersonSyncItem]) -> List[PersonSyncItem]:
        seen = set()
        for person in persons:
            if person.id in seen:
                raise ValueError(f"duplicate id {person.id}")
            seen.add(person.id)
        return persons


# ---------------------------------------------------------
# UPDATE
# only keys present in the body are applied (exclude_unset)
# ---------------------------------------------------------
class PersonUpdate(BaseModel):
    path: Optional[List[str]] = None
    pathLabel: Optional[str] = Field(default=None, max_length=255)
    name: Optional[str] = Field(default=None, max_length=64)
    rank: Optional[int] = None
    status: Optional[LifeStatus] = None
    maritalStatus: Optional[MaritalStatus] = None
    photoPath: Optional[str] = Field(default=None, max_length=512)
    traits: Optional[str] = None
    contact: Optional[str] = Field(default=None, max_length=255)


# ---------------------------------------------------------
# OUTPUT
# ---------------------------------------------------------
class PersonOut(BaseModel):
    openid: str
    id: str
    path: List[str]
    pathLabel: Optional[str] = Field(default=None, validation_alias="path_label")
    name: str
    rank: int
    status: Optional[str] = None
    maritalStatus: Optional[str] = Field(default=None, validation_alias="marital_status")
    photoPath: Optional[str] = Field(default=None, validation_alias="photo_path")
    traits: Optional[str] = None
    contact: Optional[str] = None
    createdAt: datetime = Field(validation_alias="created_at")
    updatedAt: datetime = Field(validation_alias="updated_at")

    model_config = {
        "from_attributes": True
    }
