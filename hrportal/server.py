"""HTTP endpoint for login validation."""

from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import urlparse

from .config import Settings
from .sheets import SheetsCredentialSource
from .validator import ErrorKind, Failure, LoginRequest, LoginValidator, LoginVerdict, MSG_REQUIRED

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

LOGIN_PATHS = frozenset({"/", "/validate-login"})
MAX_BODY_BYTES = 64 * 1024
MSG_INTERNAL = "Internal server error"

_STATUS_BY_KIND = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.CONFIG_ERROR: 500,
    ErrorKind.UPSTREAM_UNAVAILABLE: 500,
    ErrorKind.SCHEMA_ERROR: 500,
}


def verdict_to_response(verdict: LoginVerdict) -> tuple[int, dict[str, Any]]:
    """Map a verdict to an HTTP status code and JSON body."""
    if isinstance(verdict, Failure):
        return _STATUS_BY_KIND[verdict.error_kind], {"success": False, "error": verdict.message}
    return 200, {"success": True, "message": verdict.message, "user": verdict.user.to_dict()}


class LoginRequestHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the login endpoint."""

    validator: LoginValidator

    def log_message(self, format: str, *args: Any) -> None:
        logger.info("%s - %s", self.address_string(), format % args)

    def do_OPTIONS(self) -> None:
        self.send_response(200)
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", "2")
        self.end_headers()
        self.wfile.write(b"ok")

    def do_POST(self) -> None:
        if urlparse(self.path).path not in LOGIN_PATHS:
            self._send_json(404, {"success": False, "error": "Not Found"})
            return

        try:
            payload = self._read_json()
            request = LoginRequest.from_payload(payload)
            if request is None:
                self._send_json(400, {"success": False, "error": MSG_REQUIRED})
                return
            status, body = verdict_to_response(self.validator.validate(request))
        except Exception:
            logger.exception("Login validation error")
            status, body = 500, {"success": False, "error": MSG_INTERNAL}

        self._send_json(status, body)

    def _read_json(self) -> Any:
        length = int(self.headers.get("Content-Length") or 0)
        if length < 0 or length > MAX_BODY_BYTES:
            raise ValueError(f"Unacceptable Content-Length: {length}")
        raw = self.rfile.read(length) if length else b""
        return json.loads(raw.decode("utf-8"))

    def _send_json(self, code: int, body: dict[str, Any]) -> None:
        data = json.dumps(body).encode("utf-8")
        self.send_response(code)
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)


def make_server(validator: LoginValidator, host: str, port: int) -> ThreadingHTTPServer:
    """Create a threaded HTTP server bound to ``host:port``.

    The handler class is subclassed per server so that two servers in the
    same process never share a validator.
    """

    class _Handler(LoginRequestHandler):
        pass

    _Handler.validator = validator

    server = ThreadingHTTPServer((host, port), _Handler)
    server.daemon_threads = True
    return server


def serve(settings: Settings, *, host: str | None = None, port: int | None = None) -> None:
    """Run the login endpoint until interrupted."""
    bind_host = host or settings.host
    bind_port = port if port is not None else settings.port

    with SheetsCredentialSource(base_url=settings.sheets_base_url, timeout=settings.fetch_timeout) as source:
        validator = LoginValidator(settings, source)
        server = make_server(validator, bind_host, bind_port)
        logger.info("Serving login endpoint on http://%s:%s", *server.server_address[:2])
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Shutting down")
        finally:
            server.server_close()
