"""Error taxonomy shared by the API client, session and views."""

from typing import Any


class ConsoleError(Exception):
    """Base exception for all console errors."""

    pass


class ValidationError(ConsoleError):
    """Raised when required fields are missing or malformed client-side.

    Attributes:
        fields: Names of the offending fields.
    """

    def __init__(self, fields: list[str], message: str | None = None) -> None:
        self.fields = fields
        super().__init__(message or f"Missing or invalid fields: {', '.join(fields)}")


class RequestError(ConsoleError):
    """Raised when the backend answers with a non-2xx status.

    Attributes:
        status_code: HTTP status code.
        message: Backend-provided message, when present.
        payload: Decoded response body, when JSON.
    """

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        payload: Any = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.payload = payload
        detail = f": {message}" if message else ""
        super().__init__(f"HTTP {status_code}{detail}")


class AuthenticationError(RequestError):
    """Raised on 401/403 responses."""

    pass


class NetworkError(ConsoleError):
    """Raised when a request never reached the backend."""

    pass


class ResponseError(ConsoleError):
    """Raised when a successful response does not match the expected schema.

    Attributes:
        schema: Name of the expected model.
        fields: Locations of the offending values.
    """

    def __init__(self, schema: str, fields: list[str]) -> None:
        self.schema = schema
        self.fields = fields
        super().__init__(f"Unexpected {schema} response: {', '.join(fields)}")
