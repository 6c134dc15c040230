"""Authentication schemas."""

from pydantic import Field

from hypercyber.api.schemas.base import ApiModel, RequestModel, RequiredStr


class User(ApiModel):
    """Authenticated console user."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None

    @property
    def display_name(self) -> str:
        full = " ".join(p for p in (self.first_name, self.last_name) if p)
        return full or self.email


class LoginRequest(RequestModel):
    email: RequiredStr
    password: str = Field(min_length=1)


class RegisterRequest(RequestModel):
    email: RequiredStr
    password: str = Field(min_length=1)
    first_name: str | None = None
    last_name: str | None = None


class AuthResponse(ApiModel):
    """Token pair and user returned by login/register."""

    token: str
    refresh_token: str
    user: User


class RefreshResponse(ApiModel):
    token: str
