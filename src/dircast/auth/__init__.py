"""OAuth2 credential lifecycle for the Dropbox app."""

from dircast.auth.broker import (
    AuthState,
    Credentials,
    CredentialBroker,
    build_authorize_url,
    exchange_refresh_token,
    interactive_authorize,
)
from dircast.auth.prompts import ConsoleCodePrompt

__all__ = [
    "AuthState",
    "Credentials",
    "CredentialBroker",
    "ConsoleCodePrompt",
    "build_authorize_url",
    "exchange_refresh_token",
    "interactive_authorize",
]
