"""OAuth2 credential handling for the Dropbox app.

A long-lived refresh token is exchanged for a fresh access token on every
run. When no refresh token is configured, the operator is sent through the
authorization-code flow once to obtain one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from urllib.parse import urlencode

import requests
from pydantic import BaseModel, ValidationError

from dircast.config.schema import UNSET_TOKEN_VALUES
from dircast.utils.errors import AuthError, AuthFailure

logger = logging.getLogger(__name__)

TOKEN_URL = "https://api.dropbox.com/oauth2/token"
AUTHORIZE_URL = "https://www.dropbox.com/oauth2/authorize"

# Takes the authorization URL, returns the code the operator pasted
CodePrompt = Callable[[str], str]


class AuthState(str, Enum):
    """Per-run credential states."""

    NO_CREDENTIAL = "no_credential"
    EXCHANGE_ONLY = "exchange_only"
    AWAITING_USER_CODE = "awaiting_user_code"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class TokenResponse(BaseModel):
    """Body of a successful token endpoint response."""

    access_token: str = ""
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    scope: str | None = None
    uid: str | None = None
    account_id: str | None = None


class Credentials(BaseModel):
    """Tokens held in memory for one run."""

    access_token: str
    refresh_token: str
    newly_granted: bool = False


def build_authorize_url(app_key: str, authorize_url: str = AUTHORIZE_URL) -> str:
    """Authorization URL requesting offline access (a refresh token)."""
    query = urlencode(
        {
            "response_type": "code",
            "token_access_type": "offline",
            "client_id": app_key,
        }
    )
    return f"{authorize_url}?{query}"


def _require_app_credentials(app_key: str | None, app_secret: str | None) -> None:
    if not app_key or not app_secret:
        raise AuthError(
            AuthFailure.MISSING_CREDENTIALS,
            "Missing Dropbox app key or secret (set DROPBOX_APP_KEY and DROPBOX_APP_SECRET)",
        )


def _post_token_request(
    session: requests.Session,
    token_url: str,
    form: dict[str, str],
    app_key: str,
    app_secret: str,
    timeout: float | None,
) -> requests.Response:
    return session.post(
        token_url,
        data=form,
        auth=(app_key, app_secret),
        timeout=timeout,
    )


def _is_invalid_grant(response: requests.Response) -> bool:
    if response.status_code != 400:
        return False
    try:
        body = response.json()
    except ValueError:
        return False
    return isinstance(body, dict) and body.get("error") == "invalid_grant"


def _parse_token_response(response: requests.Response, failure: AuthFailure) -> TokenResponse:
    try:
        return TokenResponse.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise AuthError(failure, f"Could not decode token response: {e}") from e


def exchange_refresh_token(
    refresh_token: str,
    app_key: str | None,
    app_secret: str | None,
    *,
    session: requests.Session | None = None,
    token_url: str = TOKEN_URL,
    timeout: float | None = 60.0,
) -> str:
    """Exchange a refresh token for a short-lived access token.

    Args:
        refresh_token: Long-lived refresh token
        app_key: Dropbox app key
        app_secret: Dropbox app secret
        session: Optional requests session
        token_url: Token endpoint
        timeout: Request timeout in seconds

    Returns:
        The access token

    Raises:
        AuthError: missing_credentials, invalid_grant or transport
    """
    _require_app_credentials(app_key, app_secret)
    session = session or requests.Session()

    form = {"grant_type": "refresh_token", "refresh_token": refresh_token}
    try:
        response = _post_token_request(session, token_url, form, app_key, app_secret, timeout)
    except requests.RequestException as e:
        raise AuthError(AuthFailure.TRANSPORT, f"Token request failed: {e}") from e

    if _is_invalid_grant(response):
        raise AuthError(
            AuthFailure.INVALID_GRANT,
            "Dropbox rejected the refresh token; re-run authorization",
        )
    if not response.ok:
        raise AuthError(
            AuthFailure.TRANSPORT,
            f"Token endpoint returned {response.status_code}: {response.text}",
        )

    token = _parse_token_response(response, AuthFailure.TRANSPORT)
    if not token.access_token:
        raise AuthError(AuthFailure.TRANSPORT, "Empty access_token in token response")
    return token.access_token


def interactive_authorize(
    app_key: str | None,
    app_secret: str | None,
    *,
    prompt: CodePrompt,
    session: requests.Session | None = None,
    token_url: str = TOKEN_URL,
    authorize_url: str = AUTHORIZE_URL,
    timeout: float | None = 60.0,
) -> str:
    """Run the authorization-code flow and return a refresh token.

    Args:
        app_key: Dropbox app key
        app_secret: Dropbox app secret
        prompt: Shows the authorization URL and returns the pasted code
        session: Optional requests session
        token_url: Token endpoint
        authorize_url: Authorization page
        timeout: Request timeout in seconds

    Returns:
        The newly granted refresh token

    Raises:
        AuthError: missing_credentials, code_exchange_failed or
            no_refresh_token_granted
    """
    _require_app_credentials(app_key, app_secret)
    session = session or requests.Session()

    try:
        code = prompt(build_authorize_url(app_key, authorize_url))
    except (EOFError, KeyboardInterrupt) as e:
        raise AuthError(AuthFailure.CODE_EXCHANGE_FAILED, "No authorization code entered") from e
    code = (code or "").strip()
    if not code:
        raise AuthError(AuthFailure.CODE_EXCHANGE_FAILED, "No authorization code entered")

    form = {"grant_type": "authorization_code", "code": code}
    try:
        response = _post_token_request(session, token_url, form, app_key, app_secret, timeout)
    except requests.RequestException as e:
        raise AuthError(AuthFailure.CODE_EXCHANGE_FAILED, f"Token request failed: {e}") from e

    if not response.ok:
        raise AuthError(
            AuthFailure.CODE_EXCHANGE_FAILED,
            f"Token endpoint returned {response.status_code}: {response.text}",
        )

    token = _parse_token_response(response, AuthFailure.CODE_EXCHANGE_FAILED)
    if not token.refresh_token:
        raise AuthError(
            AuthFailure.NO_REFRESH_TOKEN_GRANTED,
            "No refresh_token in response; ensure offline access was requested",
        )
    return token.refresh_token


class CredentialBroker:
    """Drives one run from no credential to an access token.

    There is no retry: any failure leaves the broker in FAILED and the
    AuthError propagates to the caller.
    """

    def __init__(
        self,
        app_key: str | None,
        app_secret: str | None,
        *,
        prompt: CodePrompt | None = None,
        session: requests.Session | None = None,
        token_url: str = TOKEN_URL,
        authorize_url: str = AUTHORIZE_URL,
        timeout: float | None = 60.0,
    ) -> None:
        self.app_key = app_key
        self.app_secret = app_secret
        self.prompt = prompt
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.token_url = token_url
        self.authorize_url = authorize_url
        self.timeout = timeout
        self.state = AuthState.NO_CREDENTIAL

    def authenticate(self, refresh_token: str | None = None) -> Credentials:
        """Obtain an access token, authorizing interactively if needed.

        Args:
            refresh_token: Configured refresh token; None, "" and "-" mean absent

        Returns:
            Credentials for this run

        Raises:
            AuthError: If any step fails
        """
        if self.state is not AuthState.NO_CREDENTIAL:
            raise RuntimeError(f"CredentialBroker already used (state: {self.state.value})")

        newly_granted = False
        try:
            if refresh_token is None or refresh_token.strip() in UNSET_TOKEN_VALUES:
                refresh_token = self.authorize()
                newly_granted = True

            self.state = AuthState.EXCHANGE_ONLY
            access_token = exchange_refresh_token(
                refresh_token,
                self.app_key,
                self.app_secret,
                session=self.session,
                token_url=self.token_url,
                timeout=self.timeout,
            )
        except AuthError:
            self.state = AuthState.FAILED
            raise

        self.state = AuthState.AUTHENTICATED
        logger.debug("Obtained Dropbox access token")
        return Credentials(
            access_token=access_token,
            refresh_token=refresh_token,
            newly_granted=newly_granted,
        )

    def authorize(self) -> str:
        """Run the interactive flow and return a refresh token."""
        try:
            _require_app_credentials(self.app_key, self.app_secret)
            if self.prompt is None:
                raise AuthError(
                    AuthFailure.MISSING_CREDENTIALS,
                    "No refresh token configured and no interactive prompt available",
                )
            self.state = AuthState.AWAITING_USER_CODE
            logger.info("No refresh token configured, starting authorization flow")
            refresh_token = interactive_authorize(
                self.app_key,
                self.app_secret,
                prompt=self.prompt,
                session=self.session,
                token_url=self.token_url,
                authorize_url=self.authorize_url,
                timeout=self.timeout,
            )
        except AuthError:
            self.state = AuthState.FAILED
            raise
        logger.info("Obtained a new refresh token")
        return refresh_token

    def close(self) -> None:
        """Close the HTTP session if the broker created it."""
        if self._owns_session:
            self.session.close()
