"""Authentication endpoints (``/auth``)."""

from hypercyber.api.schemas import AuthResponse, LoginRequest, RefreshResponse, RegisterRequest, User, decode
from hypercyber.client.http import ApiClient


class AuthAPI:
    """Login, registration, token refresh and OIDC entry point."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def login(self, email: str, password: str) -> AuthResponse:
        payload = LoginRequest.build(email=email, password=password)
        data = await self._client.post("/auth/login", json=payload.to_create_body())
        return decode(AuthResponse, data)

    async def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> AuthResponse:
        payload = RegisterRequest.build(
            email=email,
            password=password,
            first_name=first_name or None,
            last_name=last_name or None,
        )
        data = await self._client.post("/auth/register", json=payload.to_create_body())
        return decode(AuthResponse, data)

    async def me(self) -> User:
        """Fetch the user owning the current bearer token."""
        data = await self._client.get("/auth/me")
        return decode(User, data)

    async def refresh(self, refresh_token: str) -> RefreshResponse:
        data = await self._client.post("/auth/refresh", json={"refresh_token": refresh_token})
        return decode(RefreshResponse, data)

    def oidc_authorize_url(self) -> str:
        """URL the browser is sent to for federated login.

        The backend redirects to the identity provider, then back to the
        console's ``/auth/callback`` route with ``token`` and
        ``refresh_token`` query parameters.
        """
        return self._client.url_for("/auth/oidc/authorize")
