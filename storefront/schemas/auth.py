from pydantic import EmailStr, field_validator

from .common import APIModel
from .user import User


class LoginRequest(APIModel):
    email: EmailStr
    password: str

    @field_validator("email")
    def email_validator(cls, value: str):
        return value.lower()

    @field_validator("password")
    def password_validator(cls, value: str):
        if not value:
            raise ValueError("Password is required")
        return value


class ChangePasswordRequest(APIModel):
    current_password: str
    new_password: str

    @field_validator("current_password")
    def current_password_validator(cls, value: str):
        if not value:
            raise ValueError("Current password is required")
        return value

    @field_validator("new_password")
    def new_password_validator(cls, value: str):
        if len(value) < 6:
            raise ValueError("New password must be at least 6 characters long")
        return value


class DeleteAccountRequest(APIModel):
    password: str = ""


class AuthData(APIModel):
    user: User
    token: str
