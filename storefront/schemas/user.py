import datetime
import re
from typing import Optional

from pydantic import EmailStr, field_validator

from .common import APIModel
from ..db.enums import UserRoleType

PHONE_PATTERN = re.compile(r"^\+?[0-9][0-9\s\-().]{6,19}$")


def _required_name(value: str, message: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value


class UserBase(APIModel):
    email: EmailStr
    first_name: str
    last_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None

    @field_validator("email")
    def email_validator(cls, value: str):
        return value.lower()


class UserCreate(UserBase):
    password: str

    @field_validator("password")
    def password_validator(cls, value: str):
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return value

    @field_validator("first_name")
    def first_name_validator(cls, value: str):
        return _required_name(value, "First name is required")

    @field_validator("last_name")
    def last_name_validator(cls, value: str):
        return _required_name(value, "Last name is required")


class UserUpdate(APIModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None

    @field_validator("first_name")
    def first_name_validator(cls, value: Optional[str]):
        if value is None:
            return value
        return _required_name(value, "First name cannot be empty")

    @field_validator("last_name")
    def last_name_validator(cls, value: Optional[str]):
        if value is None:
            return value
        return _required_name(value, "Last name cannot be empty")

    @field_validator("email")
    def email_validator(cls, value: Optional[str]):
        return value.lower() if value else value

    @field_validator("phone")
    def phone_validator(cls, value: Optional[str]):
        if value is not None and not PHONE_PATTERN.match(value.strip()):
            raise ValueError("Please provide a valid phone number")
        return value.strip() if value else value


class User(UserBase):
    id: int
    role: UserRoleType
    is_active: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime


class UserData(APIModel):
    user: User
