# coursehub/schemas/auth.py
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator

from coursehub.models.user import UserRole


class UserPublic(BaseModel):
    id: int
    username: str
    email: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str
    role: UserRole = UserRole.USER

    @field_validator("username")
    @classmethod
    def username_length(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters long")
        return v

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _validate_password(v)


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _validate_password(v)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _validate_password(v)


class ProfileUpdate(BaseModel):
    username: str | None = None
    email: str | None = None

    @field_validator("username")
    @classmethod
    def username_length(cls, v: str | None) -> str | None:
        if v is not None and len(v.strip()) < 3:
            raise ValueError("Username must be at least 3 characters long")
        return v.strip() if v is not None else v

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str | None) -> str | None:
        return _validate_email(v) if v is not None else v


class UserList(BaseModel):
    users: list[UserPublic]


class MessageResponse(BaseModel):
    message: str


def _validate_email(v: str) -> str:
    try:
        return validate_email(v.strip(), check_deliverability=False).normalized
    except EmailNotValidError:
        raise ValueError("Please provide a valid email")


def _validate_password(v: str) -> str:
    if len(v.strip()) < 6:
        raise ValueError("Password must be at least 6 characters long")
    return v
