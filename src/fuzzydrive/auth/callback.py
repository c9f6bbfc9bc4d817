"""Loopback HTTP endpoint that receives the OAuth redirect."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from urllib.parse import parse_qs
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from fuzzydrive.errors import AuthenticationFailedError

logger = logging.getLogger(__name__)

CALLBACK_HOST: str = "127.0.0.1"
CALLBACK_PORT: int = 8080
CALLBACK_PATH: str = "/callback"

_SUCCESS_PAGE = (
    b"<html><body><h1>Authentication complete</h1>"
    b"<p>You can close this tab.</p></body></html>"
)
_FAILURE_PAGE = b"<html><body><h1>Authentication error</h1></body></html>"


@dataclass(frozen=True)
class CallbackMessage:
    """Message posted to the waiting flow. kind: code | error | cancelled."""

    kind: str
    value: Optional[str] = None


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format, *args):  # noqa: A002
        logger.debug("callback: " + format, *args)


class CallbackServer:
    """
    Serve the redirect target on a background thread.

    Every request to the callback path becomes a `CallbackMessage` on an
    internal queue; `wait_for_code` consumes them until a code arrives, the
    deadline passes, or `cancel` is called.
    """

    def __init__(
        self,
        host: str = CALLBACK_HOST,
        port: int = CALLBACK_PORT,
        path: str = CALLBACK_PATH,
    ) -> None:
        self._host = host
        self._port = port
        self._path = path
        self._messages: queue.Queue[CallbackMessage] = queue.Queue()
        self._server: Optional[WSGIServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        if self._server is not None:
            return self._server.server_port
        return self._port

    def __enter__(self) -> CallbackServer:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self) -> None:
        try:
            self._server = make_server(
                self._host,
                self._port,
                self._app,
                handler_class=_QuietHandler,
            )
        except OSError as exc:
            raise AuthenticationFailedError(
                "Failed to listen for the OAuth callback",
                details={"host": self._host, "port": self._port},
                cause=exc,
            ) from exc

        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"poll_interval": 0.1},
            name="fuzzydrive-oauth-callback",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Listening for OAuth callback on %s:%s", self._host, self.port)

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join()
        self._server = None
        self._thread = None

    def cancel(self) -> None:
        """Make a pending `wait_for_code` give up."""
        self._messages.put(CallbackMessage(kind="cancelled"))

    def wait_for_code(self, timeout: Optional[float]) -> str:
        """
        Block until an authorization code arrives.

        Raises:
            AuthenticationFailedError: on timeout, cancellation, or an `error`
                parameter in the redirect (e.g. the user denied consent).
        """
        try:
            message = self._messages.get(timeout=timeout)
        except queue.Empty:
            raise AuthenticationFailedError(
                "Timed out waiting for the OAuth callback",
                details={"timeout_seconds": timeout},
            ) from None

        if message.kind == "code" and message.value:
            return message.value
        if message.kind == "cancelled":
            raise AuthenticationFailedError("Authorization was cancelled")
        raise AuthenticationFailedError(
            "Authorization server returned an error",
            details={"error": message.value},
        )

    def _app(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        if environ.get("PATH_INFO") != self._path:
            start_response("404 Not Found", [("Content-Type", "text/plain")])
            return [b"Not Found"]

        params = parse_qs(environ.get("QUERY_STRING", ""))
        code = params.get("code", [None])[0]
        if code:
            self._messages.put(CallbackMessage(kind="code", value=code))
            start_response("200 OK", [("Content-Type", "text/html; charset=utf-8")])
            return [_SUCCESS_PAGE]

        error = params.get("error", [None])[0]
        if error:
            self._messages.put(CallbackMessage(kind="error", value=error))

        start_response("400 Bad Request", [("Content-Type", "text/html; charset=utf-8")])
        return [_FAILURE_PAGE]
