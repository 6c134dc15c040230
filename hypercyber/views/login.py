"""Login page: credentials, self-registration, federated login link."""

from dataclasses import dataclass
from enum import StrEnum

from hypercyber.api import AuthAPI
from hypercyber.api.schemas import User
from hypercyber.cache import QueryCache
from hypercyber.session import AuthSession
from hypercyber.views.base import View


class LoginMode(StrEnum):
    LOGIN = "login"
    REGISTER = "register"


@dataclass
class LoginForm:
    email: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""


class LoginView(View):
    title = "Sign in"

    def __init__(self, cache: QueryCache, session: AuthSession, auth_api: AuthAPI) -> None:
        super().__init__(cache)
        self._session = session
        self._auth_api = auth_api
        self.mode = LoginMode.LOGIN
        self.form = LoginForm()

    def toggle_mode(self) -> LoginMode:
        self.mode = LoginMode.REGISTER if self.mode == LoginMode.LOGIN else LoginMode.LOGIN
        self.error = None
        return self.mode

    @property
    def oidc_url(self) -> str:
        return self._auth_api.oidc_authorize_url()

    async def submit(self) -> User | None:
        """Log in or register; on failure the session stays anonymous."""
        form = self.form
        if self.mode == LoginMode.LOGIN:
            user = await self._run(self._session.login(form.email, form.password), "login")
        else:
            user = await self._run(
                self._session.register(form.email, form.password, form.first_name or None, form.last_name or None),
                "register",
            )
        if user is not None:
            self._cache.clear()
            self.form = LoginForm()
        else:
            self.form.password = ""
        return user

    def render(self) -> str:
        lines = [self.title if self.mode == LoginMode.LOGIN else "Create an account"]
        if self.error:
            lines.append(f"Error: {self.error}")
        lines.append(f"Single sign-on: {self.oidc_url}")
        return "\n".join(lines)
