"""Session holder: who is logged in, and the stored credentials behind it.

The session is an explicitly constructed object injected into the views
and the routing shell. Its lifecycle is ``init()`` at start-up (restore
from durable storage); there is no teardown.
"""

from enum import StrEnum

from hypercyber.api.auth import AuthAPI
from hypercyber.api.schemas import AuthResponse, User
from hypercyber.client.errors import ConsoleError, ValidationError
from hypercyber.session.store import CredentialStore
from hypercyber.session.tokens import TokenClaims, decode_claims
from hypercyber.utils.logger import get_logger

logger = get_logger(__name__)


class SessionState(StrEnum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class AuthSession:
    """Authentication state machine ``anonymous <-> authenticated(user)``.

    Attributes:
        user: Current user, or None when anonymous.
    """

    def __init__(self, auth_api: AuthAPI, store: CredentialStore) -> None:
        """Initialize an anonymous session.

        Args:
            auth_api: Authentication endpoints.
            store: Durable token storage.
        """
        self._auth_api = auth_api
        self._store = store
        self.user: User | None = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self.user is not None else SessionState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def token(self) -> str | None:
        """Current access token (read by the HTTP adapter)."""
        return self._store.token

    @property
    def token_claims(self) -> TokenClaims | None:
        token = self._store.token
        return decode_claims(token) if token else None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def init(self) -> SessionState:
        """Restore the session from durable storage.

        With a stored token the current user is fetched optimistically; if
        that fails the stored credentials are discarded and the session
        stays anonymous. No error is surfaced.

        Returns:
            Resulting state.
        """
        self._store.reload()
        self.user = None

        if not self._store.has_token():
            return self.state

        try:
            self.user = await self._auth_api.me()
        except ConsoleError as e:
            logger.info("session_restore_failed", error=str(e))
            self._store.clear()
            return self.state

        logger.info("session_restored", user_id=self.user.id)
        return self.state

    async def login(self, email: str, password: str) -> User:
        """Authenticate with credentials.

        On failure the state and storage are left untouched and the error
        propagates.
        """
        response = await self._auth_api.login(email, password)
        return self._authenticate(response)

    async def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        response = await self._auth_api.register(email, password, first_name, last_name)
        return self._authenticate(response)

    def logout(self) -> None:
        """Forget the user and both stored values. Idempotent."""
        self._store.clear()
        if self.user is not None:
            logger.info("logged_out", user_id=self.user.id)
        self.user = None

    async def refresh(self) -> str:
        """Exchange the stored refresh token for a new access token.

        Raises:
            ValidationError: If no refresh token is stored.
        """
        refresh_token = self._store.refresh_token
        if not refresh_token:
            raise ValidationError(["refresh_token"], "No refresh token stored")
        response = await self._auth_api.refresh(refresh_token)
        self._store.update_token(response.token)
        logger.info("token_refreshed")
        return response.token

    def accept_tokens(self, token: str, refresh_token: str) -> None:
        """Persist a token pair obtained out of band (federated login).

        The user is not fetched here: callers reload the whole console so
        every component starts from the new session.
        """
        if not token or not refresh_token:
            raise ValidationError(
                [name for name, v in (("token", token), ("refresh_token", refresh_token)) if not v]
            )
        self._store.save(token, refresh_token)
        logger.info("external_tokens_accepted")

    def _authenticate(self, response: AuthResponse) -> User:
        self._store.save(response.token, response.refresh_token)
        self.user = response.user
        logger.info("login_succeeded", user_id=response.user.id)
        return response.user
