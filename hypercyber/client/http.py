"""Async HTTP adapter for the HyperCyber REST API.

Wraps outbound requests with the configured base URL, injects the bearer
token on every call, unwraps JSON bodies and maps failures onto the
console error taxonomy.
"""

from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

import httpx

from hypercyber.client.errors import AuthenticationError, NetworkError, RequestError
from hypercyber.settings import settings
from hypercyber.utils.logger import get_logger

logger = get_logger(__name__)

TokenProvider = Callable[[], str | None]

# (filename, content, content type) tuples accepted by httpx multipart
UploadFile = tuple[str, bytes, str]


class ApiClient:
    """HTTP client bound to the backend API root.

    The token is read from ``token_provider`` on every request so that a
    login, logout or OIDC callback takes effect without rebuilding the
    client.

    Attributes:
        base_url: API root including the ``/api`` prefix.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token_provider: Returns the current access token or None.
            base_url: Overrides settings.api.base_url.
            timeout: Overrides settings.api.timeout.
            transport: Custom transport (tests use httpx.MockTransport).
        """
        self.base_url = (base_url or settings.api.base_url).rstrip("/")
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.api.timeout,
            headers={"User-Agent": settings.api.user_agent, "Accept": "application/json"},
            transport=transport,
        )

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        files: Mapping[str, UploadFile] | None = None,
    ) -> Any:
        return await self.request("POST", path, params=params, json=json, files=files)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def url_for(self, path: str) -> str:
        """Absolute URL of an API path (for browser redirects)."""
        return f"{self.base_url}{path}"

    async def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        files: Mapping[str, UploadFile] | None = None,
    ) -> Any:
        """Execute a request and return the decoded body.

        Args:
            method: HTTP method.
            path: Path relative to the API root, with a leading slash.
            params: Query parameters; None values are dropped.
            json: JSON body.
            files: Multipart files, keyed by form field.

        Returns:
            Decoded JSON body, raw text for non-JSON bodies, or None when
            the response is empty.

        Raises:
            RequestError: On non-2xx responses.
            AuthenticationError: On 401/403 responses.
            NetworkError: When the backend could not be reached.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}

        try:
            response = await self._client.request(
                method,
                path,
                params=query or None,
                json=json,
                files=files,
                headers=self._auth_headers(),
            )
        except httpx.TransportError as e:
            logger.warning("request_failed", method=method, path=path, error=str(e))
            raise NetworkError(f"{method} {path}: {e}") from e

        logger.debug(
            "request_completed",
            method=method,
            path=path,
            status=response.status_code,
        )
        return self._handle_response(response)

    def _auth_headers(self) -> dict[str, str]:
        token = self._token_provider()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        """Unwrap a response body or raise the matching error.

        Args:
            response: HTTP response object.

        Returns:
            Decoded body, or None when empty.
        """
        payload = _decode_body(response)

        if response.is_success:
            return payload

        message = _extract_message(payload)
        error_cls = (
            AuthenticationError
            if response.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN)
            else RequestError
        )
        logger.info(
            "request_rejected",
            method=response.request.method,
            path=response.request.url.path,
            status=response.status_code,
            message=message,
        )
        raise error_cls(response.status_code, message, payload)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def _extract_message(payload: Any) -> str | None:
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            value = payload.get(key)
            if value:
                return str(value)
        return None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None
