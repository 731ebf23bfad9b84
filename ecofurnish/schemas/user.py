# ecofurnish/schemas/user.py
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

AuthMode = Literal["login", "signup"]


class LoginRequest(SQLModel):
    """Payload for password sign-in."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class SignupRequest(SQLModel):
    """
    Payload for account creation.

    Validation rules:
      - email must be a valid EmailStr
      - name cannot be empty or whitespace
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class SessionRestore(SQLModel):
    """Tokens of a session issued to the browser by the Supabase SDK."""

    model_config = ConfigDict(extra="forbid")

    access_token: str
    refresh_token: str


class AuthModalUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    open: bool
    mode: AuthMode | None = None


class UserRead(SQLModel):
    """Response schema for the signed-in visitor."""

    id: str
    email: str
    name: str
    avatar_url: str | None = None


class SessionState(SQLModel):
    """Everything the view needs to render the account area."""

    user: UserRead | None = None
    is_authenticated: bool
    is_auth_modal_open: bool
    auth_mode: AuthMode


class OAuthRedirect(SQLModel):
    """Where the browser must go to continue Google sign-in."""

    url: str
