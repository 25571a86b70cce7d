from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from medgram.models.user import UserRole


class CamelModel(BaseModel):
    """Accepts and emits the camelCase keys the web client uses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)
    full_name: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.USER
    npi_number: Optional[str] = Field(None, max_length=20)


class UserLogin(CamelModel):
    username: str
    password: str


class UserSummary(CamelModel):
    """What registration hands back: just enough to address the new account."""

    id: str
    username: str
    role: UserRole

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: UUID | str) -> str:
        return str(value)


class UserOut(CamelModel):
    """Full profile of the caller. Never includes the password hash."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    username: str
    full_name: Optional[str]
    role: UserRole
    avatar_url: Optional[str]
    verified: bool
    npi_number: Optional[str]
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: UUID | str) -> str:
        return str(value)


class RegisterResponse(BaseModel):
    user: UserSummary
    token: str


class LoginResponse(BaseModel):
    user: UserOut
    token: str
