"""
User directory schemas.

POST   /users        → UserCreate  → UserOut (201)
GET    /users        → list[UserOut]
GET    /users/{id}   → UserOut
PATCH  /users/{id}   → UserUpdate  → UserOut
DELETE /users/{id}   → 204
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Email = Annotated[str, Field(max_length=256, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")]


class UserCreate(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=128)]
    email: Email
    age: int = Field(ge=1, le=150)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdate(BaseModel):
    name: Optional[Annotated[str, Field(min_length=1, max_length=128)]] = None
    email: Optional[Email] = None
    age: Optional[int] = Field(default=None, ge=1, le=150)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v is not None else v


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    age: int
    created_at: datetime
    updated_at: datetime
