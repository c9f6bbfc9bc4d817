import threading
import unittest
import urllib.error
import urllib.request
from typing import Optional

from fuzzydrive.auth import AuthorizationFlow, CallbackServer, Credential, FlowState
from fuzzydrive.errors import AuthenticationFailedError


class FakeTokenClient:
    redirect_uri = "http://localhost:8080/callback"

    def __init__(self, fail_exchange: bool = False) -> None:
        self.fail_exchange = fail_exchange
        self.exchanged = []

    def authorization_url(self, client_id: str, client_secret: str) -> str:
        return f"https://accounts.example/auth?client_id={client_id}"

    def exchange_code(self, code, client_id, client_secret, redirect_uri) -> Credential:
        self.exchanged.append((code, client_id, client_secret, redirect_uri))
        if self.fail_exchange:
            raise AuthenticationFailedError("exchange rejected")
        return Credential(access_token="at", refresh_token="rt", expires_in=3599)


class FakeServer:
    """Stands in for CallbackServer; `code` is delivered immediately."""

    def __init__(self, code: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.code = code
        self.error = error
        self.cancelled = False
        self.stopped = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stopped = True

    def cancel(self) -> None:
        self.cancelled = True

    def wait_for_code(self, timeout):
        if self.cancelled:
            raise AuthenticationFailedError("Authorization was cancelled")
        if self.error is not None:
            raise self.error
        return self.code


class TestAuthorizationFlow(unittest.TestCase):
    def test_successful_flow_reaches_done(self) -> None:
        tokens = FakeTokenClient()
        server = FakeServer(code="abc")
        opened = []

        flow = AuthorizationFlow(
            tokens,
            open_browser=lambda url: opened.append(url) or True,
            server_factory=lambda: server,
        )
        self.assertIs(flow.state, FlowState.IDLE)
        cred = flow.run("cid", "secret")

        self.assertEqual(cred.access_token, "at")
        self.assertIs(flow.state, FlowState.DONE)
        self.assertEqual(opened, ["https://accounts.example/auth?client_id=cid"])
        self.assertEqual(tokens.exchanged, [("abc", "cid", "secret", tokens.redirect_uri)])
        self.assertTrue(server.stopped)

    def test_browser_failure_is_not_fatal(self) -> None:
        def broken_browser(url: str) -> bool:
            raise RuntimeError("no display")

        flow = AuthorizationFlow(
            FakeTokenClient(),
            open_browser=broken_browser,
            server_factory=lambda: FakeServer(code="abc"),
        )
        with self.assertLogs("fuzzydrive.auth.authorization", level="WARNING"):
            cred = flow.run("cid", "secret")
        self.assertEqual(cred.access_token, "at")

    def test_timeout_fails_flow(self) -> None:
        flow = AuthorizationFlow(
            FakeTokenClient(),
            open_browser=lambda url: True,
            server_factory=lambda: FakeServer(error=AuthenticationFailedError("Timed out")),
        )
        with self.assertRaises(AuthenticationFailedError):
            flow.run("cid", "secret")
        self.assertIs(flow.state, FlowState.FAILED)

    def test_exchange_failure_fails_flow(self) -> None:
        flow = AuthorizationFlow(
            FakeTokenClient(fail_exchange=True),
            open_browser=lambda url: True,
            server_factory=lambda: FakeServer(code="abc"),
        )
        with self.assertRaises(AuthenticationFailedError):
            flow.run("cid", "secret")
        self.assertIs(flow.state, FlowState.FAILED)

    def test_cancel_before_run(self) -> None:
        server = FakeServer(code="abc")
        flow = AuthorizationFlow(
            FakeTokenClient(),
            open_browser=lambda url: True,
            server_factory=lambda: server,
        )
        flow.cancel()
        with self.assertRaises(AuthenticationFailedError):
            flow.run("cid", "secret")
        self.assertTrue(server.cancelled)
        self.assertIs(flow.state, FlowState.FAILED)

    def test_flow_is_single_use(self) -> None:
        flow = AuthorizationFlow(
            FakeTokenClient(),
            open_browser=lambda url: True,
            server_factory=lambda: FakeServer(code="abc"),
        )
        flow.run("cid", "secret")
        with self.assertRaises(AuthenticationFailedError):
            flow.run("cid", "secret")


class TestCallbackServer(unittest.TestCase):
    def _get(self, port: int, query: str) -> int:
        url = f"http://127.0.0.1:{port}/callback?{query}"
        try:
            with urllib.request.urlopen(url, timeout=5) as resp:
                return resp.status
        except urllib.error.HTTPError as exc:
            return exc.code

    def test_code_is_delivered(self) -> None:
        with CallbackServer(port=0) as server:
            status = self._get(server.port, "code=4%2Fabc&scope=x")
            self.assertEqual(status, 200)
            self.assertEqual(server.wait_for_code(timeout=5), "4/abc")

    def test_request_without_code_gets_failure_page_and_keeps_waiting(self) -> None:
        with CallbackServer(port=0) as server:
            self.assertEqual(self._get(server.port, "foo=bar"), 400)
            with self.assertRaises(AuthenticationFailedError):
                server.wait_for_code(timeout=0.05)

    def test_error_parameter_fails_wait(self) -> None:
        with CallbackServer(port=0) as server:
            self.assertEqual(self._get(server.port, "error=access_denied"), 400)
            with self.assertRaises(AuthenticationFailedError) as ctx:
                server.wait_for_code(timeout=5)
            self.assertEqual(ctx.exception.details["error"], "access_denied")

    def test_cancel_from_other_thread(self) -> None:
        with CallbackServer(port=0) as server:
            timer = threading.Timer(0.05, server.cancel)
            timer.start()
            with self.assertRaises(AuthenticationFailedError):
                server.wait_for_code(timeout=5)
            timer.join()

    def test_port_in_use_raises_authentication_failed(self) -> None:
        with CallbackServer(port=0) as first:
            with self.assertRaises(AuthenticationFailedError):
                CallbackServer(port=first.port).start()


if __name__ == "__main__":
    unittest.main()
