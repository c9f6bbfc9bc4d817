"""OAuth token endpoint client for fuzzydrive."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from fuzzydrive.errors import AuthenticationFailedError, TokenRefreshError
from fuzzydrive.util.time import now_utc

from .credential import Credential

logger = logging.getLogger(__name__)

AUTH_URI: str = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URI: str = "https://oauth2.googleapis.com/token"
REDIRECT_URI: str = "http://localhost:8080/callback"

READONLY_SCOPES: tuple[str, ...] = (
    "https://www.googleapis.com/auth/drive.readonly",
    "https://www.googleapis.com/auth/drive.metadata.readonly",
)


class TokenClient:
    """
    Build authorization URLs, exchange codes and refresh tokens.

    Code exchange goes through google-auth-oauthlib's `Flow`; refresh grants go
    through google-auth's `Credentials.refresh`.
    """

    def __init__(
        self,
        *,
        scopes: Sequence[str] = READONLY_SCOPES,
        redirect_uri: str = REDIRECT_URI,
    ) -> None:
        self._scopes = list(scopes)
        self._redirect_uri = redirect_uri

    @property
    def redirect_uri(self) -> str:
        return self._redirect_uri

    def authorization_url(self, client_id: str, client_secret: str) -> str:
        """Consent URL requesting offline access so a refresh token is issued."""
        flow = self._flow(client_id, client_secret, self._redirect_uri)
        url, _state = flow.authorization_url(access_type="offline", prompt="consent")
        return url

    def exchange_code(
        self,
        code: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
    ) -> Credential:
        """
        Exchange an authorization code for a credential.

        Raises:
            AuthenticationFailedError: if the token endpoint rejects the code.
        """
        flow = self._flow(client_id, client_secret, redirect_uri)
        try:
            token = flow.fetch_token(code=code)
        except Exception as exc:
            raise AuthenticationFailedError(
                "Failed to exchange authorization code",
                details={"redirect_uri": redirect_uri},
                cause=exc,
            ) from exc

        return _token_response_to_credential(token)

    def refresh(self, refresh_token: str, client_id: str, client_secret: str) -> Credential:
        """
        Run a refresh grant.

        The returned credential carries a refresh token only if the endpoint
        issued a new one.

        Raises:
            TokenRefreshError: on any refresh failure.
        """
        try:
            from google.auth.transport.requests import Request
            from google.oauth2.credentials import Credentials
        except Exception as exc:  # pragma: no cover
            raise TokenRefreshError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth"},
                cause=exc,
            ) from exc

        creds = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=TOKEN_URI,
            client_id=client_id,
            client_secret=client_secret,
        )
        try:
            creds.refresh(Request())
        except Exception as exc:
            raise TokenRefreshError("Failed to refresh OAuth credentials", cause=exc) from exc

        if not creds.token:
            raise TokenRefreshError("Refresh response did not include an access token")

        issued_refresh = creds.refresh_token
        return Credential(
            access_token=creds.token,
            refresh_token=issued_refresh if issued_refresh != refresh_token else None,
            expires_in=_seconds_until(creds.expiry),
            token_type="Bearer",
        )

    def _flow(self, client_id: str, client_secret: str, redirect_uri: str):
        try:
            from google_auth_oauthlib.flow import Flow
        except Exception as exc:  # pragma: no cover
            raise AuthenticationFailedError(
                "google-auth-oauthlib is not available",
                details={"hint": "Install google-auth-oauthlib"},
                cause=exc,
            ) from exc

        client_config = {
            "installed": {
                "client_id": client_id,
                "client_secret": client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [redirect_uri],
            }
        }
        # No PKCE: the verifier would have to survive between URL and exchange.
        return Flow.from_client_config(
            client_config,
            scopes=self._scopes,
            redirect_uri=redirect_uri,
            autogenerate_code_verifier=False,
        )


def _token_response_to_credential(token: dict[str, Any]) -> Credential:
    access_token = token.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        raise AuthenticationFailedError("Token response did not include an access token")

    refresh_token = token.get("refresh_token")
    expires_in = token.get("expires_in")
    token_type = token.get("token_type")
    return Credential(
        access_token=access_token,
        refresh_token=refresh_token if isinstance(refresh_token, str) else None,
        expires_in=int(expires_in) if isinstance(expires_in, (int, float)) else 0,
        token_type=token_type if isinstance(token_type, str) else "Bearer",
    )


def _seconds_until(expiry) -> int:
    # google-auth keeps expiry as a naive UTC datetime.
    if expiry is None:
        return 0
    now = now_utc().replace(tzinfo=None)
    return max(0, int((expiry - now).total_seconds()))
