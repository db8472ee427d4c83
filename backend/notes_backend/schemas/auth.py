"""
Notes Backend: Auth Schemas
==============================

What:  Registration/login request parsers and the public user projections.
How:   Request fields are declared loosely and checked by before-validators,
       so missing, null, or non-string values produce the same messages the
       API has always returned instead of pydantic's generic ones.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from notes_backend.schemas.common import ApiModel

PASSWORD_MIN_LENGTH = 6


# ── Requests ─────────────────────────────────────────────
class RegisterRequest(BaseModel):
    email: str = Field(default=None, validate_default=True)
    password: str = Field(default=None, validate_default=True)
    name: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def require_email(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise PydanticCustomError("email_required", "Email is required")
        return v.strip()

    @field_validator("password", mode="before")
    @classmethod
    def require_password(cls, v: Any) -> str:
        if not isinstance(v, str) or len(v) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {min_length} characters",
                {"min_length": PASSWORD_MIN_LENGTH},
            )
        return v

    @field_validator("name", mode="before")
    @classmethod
    def blank_name_is_absent(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None

    @property
    def display_name(self) -> str:
        """Supplied name, or the local part of the email."""
        return self.name or self.email.split("@")[0]


class LoginRequest(BaseModel):
    email: str = Field(default=None, validate_default=True)
    password: str = Field(default=None, validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def require_email(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise PydanticCustomError("credentials_required", "Email and password are required")
        return v.strip()

    @field_validator("password", mode="before")
    @classmethod
    def require_password(cls, v: Any) -> str:
        # Whitespace is a valid password; only absence is rejected
        if not isinstance(v, str) or not v:
            raise PydanticCustomError("credentials_required", "Email and password are required")
        return v


# ── Responses ────────────────────────────────────────────
class UserPublic(ApiModel):
    id: str
    email: str
    name: str
    created_at: datetime


class CurrentUser(ApiModel):
    """Identity resolved from a bearer token."""
    id: str
    email: str
    name: str


class AuthPayload(BaseModel):
    token: str
    user: UserPublic
