"""HTTP client adapter and error taxonomy."""

from hypercyber.client.errors import (
    AuthenticationError,
    ConsoleError,
    NetworkError,
    RequestError,
    ResponseError,
    ValidationError,
)
from hypercyber.client.http import ApiClient, UploadFile

__all__ = [
    "ApiClient",
    "UploadFile",
    "ConsoleError",
    "ValidationError",
    "RequestError",
    "AuthenticationError",
    "NetworkError",
    "ResponseError",
]
