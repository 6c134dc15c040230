"""Session state and durable credentials."""

from hypercyber.session.auth import AuthSession, SessionState
from hypercyber.session.store import CredentialStore
from hypercyber.session.tokens import TokenClaims, decode_claims

__all__ = ["AuthSession", "SessionState", "CredentialStore", "TokenClaims", "decode_claims"]
