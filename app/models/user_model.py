"""User models."""
import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.checkout_model import Address, AddressCreate

# At least one lower case letter, upper case letter, digit and special character
PASSWORD_REGEX = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&#^()])[A-Za-z\d@$!%*?&#^()]{8,}$"
)


def check_password(value: str) -> str:
    if not PASSWORD_REGEX.match(value):
        raise ValueError(
            "Password must have at least 8 characters including a lower case letter, "
            "an upper case letter, a digit and a special character"
        )
    return value


class AccountDetails(BaseModel):
    """Profile fields shared by sign-up, account creation and account update."""

    username: Optional[str] = Field(None, min_length=3, max_length=30)
    email: EmailStr
    first_name: str = Field(..., min_length=3, max_length=30)
    last_name: str = Field(..., min_length=3, max_length=30)
    address: Optional[AddressCreate] = None

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, value: str) -> str:
        if len(value) > 50:
            raise ValueError("Email cannot be longer than 50 characters")
        return value


class SignupRequest(AccountDetails):
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password(value)


class UserCreate(AccountDetails):
    """Account added by a moderator; without a password one is generated."""

    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: Optional[str]) -> Optional[str]:
        return check_password(value) if value else None


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Username or email")
    password: str


class ResetPasswordRequest(BaseModel):
    email: EmailStr


class User(BaseModel):
    id: str
    first_name: str
    last_name: str
    username: Optional[str] = None
    email: str
    role: str
    authorities: List[str] = Field(default_factory=list)
    is_active: bool
    is_not_locked: bool
    address: Optional[Address] = None
    last_login_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    subject: str
    authorities: List[str] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
