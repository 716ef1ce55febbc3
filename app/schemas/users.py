from typing import Optional
from datetime import datetime
from pydantic import EmailStr, Field, field_validator
from app.models import UserRole
from app.schemas.common import ApiModel, reject_null

# bcrypt only looks at the first 72 bytes; newer releases refuse anything longer
MAX_PASSWORD_BYTES = 72


def password_fits_bcrypt(password: str) -> bool:
    return len(password.encode('utf-8')) <= MAX_PASSWORD_BYTES


def check_password_length(v):
    if isinstance(v, str) and not password_fits_bcrypt(v):
        raise ValueError(f"Password may not exceed {MAX_PASSWORD_BYTES} bytes")
    return v


class UserCreate(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    role: UserRole = UserRole.STAFF

    @field_validator('password')
    @classmethod
    def password_length(cls, v):
        return check_password_length(v)


class UserUpdate(ApiModel):
    username: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)
    full_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None

    @field_validator('username', 'password', 'full_name', 'email', 'role', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator('password')
    @classmethod
    def password_length(cls, v):
        return check_password_length(v)


class LoginRequest(ApiModel):
    """
    Any string is accepted here. An over-long password is turned away by
    verify_credentials as an ordinary failed login, so the response never
    depends on whether the username exists.
    """
    username: str
    password: str


class UserResponse(ApiModel):
    """User as sent to clients; the password hash is never part of it"""
    id: int
    username: str
    full_name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None
