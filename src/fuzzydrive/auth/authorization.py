"""Interactive OAuth authorization (browser consent + loopback callback)."""

from __future__ import annotations

import enum
import logging
import threading
import webbrowser
from typing import Callable, Optional

from fuzzydrive.errors import AuthenticationFailedError

from .callback import CallbackServer
from .credential import Credential
from .token_client import TokenClient

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: float = 300.0


class FlowState(enum.Enum):
    IDLE = "idle"
    AWAITING_CALLBACK = "awaiting_callback"
    EXCHANGING = "exchanging"
    DONE = "done"
    FAILED = "failed"


class AuthorizationFlow:
    """
    One-shot interactive authorization.

    States: IDLE -> AWAITING_CALLBACK -> EXCHANGING -> DONE, with any failure
    ending in FAILED. The callback wait is bounded by `timeout_seconds` and can
    be aborted from another thread with `cancel()`.
    """

    def __init__(
        self,
        token_client: TokenClient,
        *,
        timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
        open_browser: Callable[[str], bool] = webbrowser.open,
        server_factory: Callable[[], CallbackServer] = CallbackServer,
    ) -> None:
        self._token_client = token_client
        self._timeout_seconds = timeout_seconds
        self._open_browser = open_browser
        self._server_factory = server_factory
        self._state = FlowState.IDLE
        self._server: Optional[CallbackServer] = None
        self._cancelled = threading.Event()

    @property
    def state(self) -> FlowState:
        return self._state

    def run(self, client_id: str, client_secret: str) -> Credential:
        """
        Drive the flow to completion.

        Raises:
            AuthenticationFailedError: on timeout, cancellation, denied consent,
                callback port unavailable, or a rejected code exchange.
        """
        if self._state is not FlowState.IDLE:
            raise AuthenticationFailedError(
                "Authorization flow already used",
                details={"state": self._state.value},
            )

        try:
            url = self._token_client.authorization_url(client_id, client_secret)
            with self._server_factory() as server:
                self._server = server
                self._state = FlowState.AWAITING_CALLBACK
                if self._cancelled.is_set():
                    server.cancel()
                self._launch_browser(url)
                code = server.wait_for_code(self._timeout_seconds)
            logger.info("Received authorization code")

            self._state = FlowState.EXCHANGING
            credential = self._token_client.exchange_code(
                code,
                client_id,
                client_secret,
                self._token_client.redirect_uri,
            )
        except AuthenticationFailedError:
            self._state = FlowState.FAILED
            raise
        except Exception as exc:
            self._state = FlowState.FAILED
            raise AuthenticationFailedError("OAuth authorization flow failed", cause=exc) from exc
        finally:
            self._server = None

        self._state = FlowState.DONE
        return credential

    def cancel(self) -> None:
        """Give up waiting for the callback; `run` raises AuthenticationFailedError."""
        self._cancelled.set()
        server = self._server
        if server is not None:
            server.cancel()

    def _launch_browser(self, url: str) -> None:
        logger.info("Opening browser for Google Drive authorization: %s", url)
        try:
            opened = self._open_browser(url)
        except Exception as exc:
            logger.warning("Failed to open browser (%s). Open this URL manually: %s", exc, url)
            return
        if not opened:
            logger.warning("Could not open a browser. Open this URL manually: %s", url)
