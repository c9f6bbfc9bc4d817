"""CredentialManager: keep a usable access token across invocations."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fuzzydrive.errors import TokenRefreshError

from .authorization import DEFAULT_TIMEOUT_SECONDS, AuthorizationFlow
from .credential import Credential
from .credential_store import CredentialStore
from .token_client import TokenClient

logger = logging.getLogger(__name__)

LivenessProbe = Callable[[Credential], bool]
Authorizer = Callable[[str, str], Credential]


class CredentialManager:
    """
    Decide whether a stored credential is usable, refreshable, or must be
    replaced through interactive authorization.

    Order: probe -> refresh -> interactive. Only the interactive step can fail
    the call; probe and refresh failures fall through.
    """

    def __init__(
        self,
        store: CredentialStore,
        token_client: TokenClient,
        probe: LivenessProbe,
        *,
        authorize: Optional[Authorizer] = None,
        auth_timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self._token_client = token_client
        self._probe = probe
        if authorize is None:
            authorize = self._authorize_interactively
        self._authorize = authorize
        self._auth_timeout_seconds = auth_timeout_seconds

    def ensure_authenticated(self, client_id: str, client_secret: str) -> Credential:
        """
        Return a credential that currently authorizes Drive access.

        Raises:
            AuthenticationFailedError: if interactive authorization is needed
                and does not complete.
            PersistenceError: if the token file cannot be read or written.
        """
        current = self._store.load()

        if current is not None:
            if self._is_live(current):
                logger.info("Stored OAuth token is valid")
                return current

            if current.refresh_token:
                refreshed = self._try_refresh(current.refresh_token, client_id, client_secret)
                if refreshed is not None:
                    self._store.save(refreshed)
                    logger.info("Refreshed OAuth token")
                    return refreshed

        logger.info("Authorization required; starting OAuth flow")
        credential = self._authorize(client_id, client_secret)
        self._store.save(credential)
        logger.info("Authorization complete")
        return credential

    def _is_live(self, credential: Credential) -> bool:
        try:
            return bool(self._probe(credential))
        except Exception as exc:
            logger.info("Liveness probe failed: %s", exc)
            return False

    def _try_refresh(
        self,
        refresh_token: str,
        client_id: str,
        client_secret: str,
    ) -> Optional[Credential]:
        try:
            refreshed = self._token_client.refresh(refresh_token, client_id, client_secret)
        except TokenRefreshError as exc:
            logger.info("Token refresh failed: %s", exc)
            return None
        # Not every provider reissues refresh tokens.
        return refreshed.with_refresh_token(refresh_token)

    def _authorize_interactively(self, client_id: str, client_secret: str) -> Credential:
        flow = AuthorizationFlow(
            self._token_client,
            timeout_seconds=self._auth_timeout_seconds,
        )
        return flow.run(client_id, client_secret)
