"""Client-side inspection of access tokens.

Signatures are not verified here; the backend does that on every request.
Claims are only used for display (who is logged in, when it expires).
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import jwt


@dataclass(frozen=True)
class TokenClaims:
    """Decoded JWT token claims.

    Attributes:
        sub: Subject (user id).
        email: User e-mail, when the backend includes it.
        exp: Expiration timestamp, if any.
    """

    sub: str | None
    email: str | None
    exp: datetime | None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.exp is None:
            return False
        return (now or datetime.now(UTC)) >= self.exp


def decode_claims(token: str) -> TokenClaims | None:
    """Read claims from a JWT without verifying it.

    Args:
        token: Encoded JWT string.

    Returns:
        Claims, or None if the token is not a well-formed JWT.
    """
    try:
        payload = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.InvalidTokenError:
        return None
    return _parse_payload(payload)


def _parse_payload(payload: dict[str, Any]) -> TokenClaims:
    exp = payload.get("exp")
    sub = payload.get("sub", payload.get("user_id"))
    return TokenClaims(
        sub=str(sub) if sub is not None else None,
        email=payload.get("email"),
        exp=datetime.fromtimestamp(exp, tz=UTC) if isinstance(exp, int | float) else None,
    )
