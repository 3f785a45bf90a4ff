"""
Read-only static file server for a finished report tree.

Every request path is resolved afresh against the canonical root; anything
that lands outside the root (through `..` or a symlink) is answered exactly
like a missing file.
"""
import enum
import logging
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Any, Iterable, Optional
from urllib.parse import unquote_plus

from tlparse.config import DEFAULT_SERVE_CONFIG, ServeConfig
from tlparse.core.errors import SandboxViolation, ServeError

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT = "index.html"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
MAX_PORT = 65535

CONTENT_TYPES = {
    "html": "text/html; charset=utf-8",
    "htm": "text/html; charset=utf-8",
    "css": "text/css; charset=utf-8",
    "js": "application/javascript; charset=utf-8",
    "json": "application/json; charset=utf-8",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "txt": "text/plain; charset=utf-8",
    "py": "text/x-python; charset=utf-8",
}


class ServerState(enum.Enum):
    IDLE = "idle"
    LISTENING = "listening"
    STOPPED = "stopped"


def guess_content_type(path: Path) -> str:
    ext = Path(path).suffix.lower().lstrip(".")
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def decode_url_path(raw: str) -> str:
    """Request target -> relative path: no query or fragment, no leading slash, percent and '+' decoded."""
    path = raw.split("?", 1)[0].split("#", 1)[0]
    return unquote_plus(path.lstrip("/"))


def sandboxed_path(root: Path, relative: str) -> Path:
    """
    Joins `relative` onto `root` and canonicalizes the result.
    Raises SandboxViolation when the canonical path is not inside root.
    """
    candidate = (root / (relative or DEFAULT_DOCUMENT)).resolve()
    if candidate != root and root not in candidate.parents:
        raise SandboxViolation(f"{relative!r} resolves outside {root}")
    return candidate


def resolve_request_path(root: Path, raw: str) -> Optional[Path]:
    """The regular file a request should serve, or None for a 404."""
    try:
        path = sandboxed_path(root, decode_url_path(raw))
        if not path.is_file():
            return None
    except SandboxViolation as e:
        logger.debug(f"Rejected request {raw!r}: {e}")
        return None
    except (OSError, ValueError) as e:
        logger.debug(f"Could not resolve {raw!r}: {e}")
        return None
    return path


class SandboxedRequestHandler(BaseHTTPRequestHandler):
    """GET only; every other method gets the same 404 as a missing file."""

    def _send_status(self, status: HTTPStatus, include_body: bool = True) -> None:
        body = f"{status.value} {status.phrase}".encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if include_body:
            self.wfile.write(body)

    def do_GET(self) -> None:
        path = resolve_request_path(self.server.root, self.path)
        if path is None:
            self._send_status(HTTPStatus.NOT_FOUND)
            return
        try:
            body = path.read_bytes()
        except OSError as e:
            logger.debug(f"Failed to read {path}: {e}")
            self._send_status(HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", guess_content_type(path))
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_HEAD(self) -> None:
        self._send_status(HTTPStatus.NOT_FOUND, include_body=False)

    def _reject(self) -> None:
        self._send_status(HTTPStatus.NOT_FOUND)

    do_POST = _reject
    do_PUT = _reject
    do_DELETE = _reject
    do_PATCH = _reject

    def log_message(self, fmt: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), fmt % args)


class _RootedHTTPServer(HTTPServer):
    def __init__(self, address, root: Path):
        self.root = root
        super().__init__(address, SandboxedRequestHandler)


class StaticFileServer:
    """
    IDLE -> LISTENING -> STOPPED. Binds the explicit port when one is given,
    otherwise the first free port in the configured range.
    """

    def __init__(self, root: Path, port: Optional[int] = None, config: ServeConfig = DEFAULT_SERVE_CONFIG):
        self.root = Path(root).resolve()
        self.requested_port = port
        self.config = config
        self.state = ServerState.IDLE
        self._httpd: Optional[_RootedHTTPServer] = None
        self._serving = False

    @property
    def port(self) -> Optional[int]:
        if self._httpd is None:
            return None
        return self._httpd.server_address[1]

    @property
    def url(self) -> str:
        host = "localhost" if self.config.host in ("127.0.0.1", "0.0.0.0") else self.config.host
        return f"http://{host}:{self.port}/"

    def _candidate_ports(self) -> Iterable[int]:
        if self.requested_port is not None:
            return [self.requested_port]
        start, end = self.config.port_range
        return range(start, end)

    def start(self) -> None:
        if self.state is not ServerState.IDLE:
            raise ServeError(f"Server for {self.root} is already {self.state.value}")
        if not self.root.is_dir():
            raise ServeError(f"Cannot serve {self.root}: not a directory")

        if self.requested_port is not None and not 0 <= self.requested_port <= MAX_PORT:
            raise ServeError(f"Invalid port {self.requested_port}: must be 0-{MAX_PORT}")

        last_error: Optional[Exception] = None
        for port in self._candidate_ports():
            try:
                self._httpd = _RootedHTTPServer((self.config.host, port), self.root)
                break
            except (OSError, OverflowError) as e:
                last_error = e
        if self._httpd is None:
            if self.requested_port is not None:
                raise ServeError(f"Failed to start server on port {self.requested_port}: {last_error}")
            start, end = self.config.port_range
            raise ServeError(f"No available ports in range {start}-{end - 1}")

        self.state = ServerState.LISTENING
        logger.info(f"Serving {self.root} at {self.url}")

    def serve_forever(self) -> None:
        """Blocks handling one request at a time until stop() is called."""
        if self.state is ServerState.IDLE:
            self.start()
        if self.state is not ServerState.LISTENING:
            raise ServeError(f"Server for {self.root} is {self.state.value}")
        self._serving = True
        try:
            self._httpd.serve_forever()
        finally:
            self._serving = False

    def stop(self) -> None:
        if self.state is ServerState.LISTENING:
            if self._serving:
                self._httpd.shutdown()
            self._httpd.server_close()
        self.state = ServerState.STOPPED
