"""A fake JSON-RPC endpoint that answers a single request defined in a golden file.

Golden files define one request and its response:

    // Comments and empty lines are ignored.
    // The request starts with ">".
    > {"jsonrpc":"2.0","id":1,"method":"eth_chainId"}
    // The response starts with "<".
    < {"jsonrpc":"2.0","id":1,"result":"0x1"}
"""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import IO, Any


def _parse_golden(data: bytes) -> tuple[bytes, bytes]:
    request = b""
    response = b""
    for line in data.split(b"\n"):
        if line.endswith(b"\r"):
            line = line[:-1]
        if not line:
            continue
        marker = line[:1]
        if marker == b">":
            request = line.strip(b"> ")
        elif marker == b"<":
            response = line.strip(b"< ")
        elif marker == b"/":
            continue
        else:
            raise ValueError(f"Invalid line {line.decode('utf-8', 'replace')!r}")
    return request, response


class _HTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    owner: Server


class _Handler(BaseHTTPRequestHandler):
    server: _HTTPServer

    def _serve(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length)
        owner = self.server.owner

        if body != owner._request:
            owner._fail(
                "Invalid request body (-want, +got)\n"
                f"-{owner._request.decode('utf-8', 'replace')}\n"
                f"+{body.decode('utf-8', 'replace')}"
            )
            self.send_response(500)
            self.send_header("Content-Length", "0")
            self.end_headers()
            return

        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(owner._response)))
        self.end_headers()
        self.wfile.write(owner._response)

    do_POST = _serve
    do_GET = _serve
    do_PUT = _serve

    def log_message(self, format: str, *args: Any) -> None:
        pass


class Server:
    """HTTP server that expects one request body and replies with one response.

    A request whose body differs from the golden request is answered with
    status 500 and recorded; close() then raises AssertionError.
    """

    def __init__(self, golden: str | bytes | IO) -> None:
        if hasattr(golden, "read"):
            golden = golden.read()
        if isinstance(golden, str):
            golden = golden.encode("utf-8")
        self._request, self._response = _parse_golden(bytes(golden))

        self._failures: list[str] = []
        self._lock = threading.Lock()

        self._httpd = _HTTPServer(("127.0.0.1", 0), _Handler)
        self._httpd.owner = self
        self._thread: threading.Thread | None = threading.Thread(
            target=self._httpd.serve_forever, daemon=True
        )
        self._thread.start()

    @classmethod
    def from_file(cls, path: str | Path) -> Server:
        """Return a server for the golden file at path."""
        with open(path, "rb") as f:
            return cls(f)

    @property
    def url(self) -> str:
        """The server's RPC endpoint URL."""
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def _fail(self, message: str) -> None:
        with self._lock:
            self._failures.append(message)

    def close(self) -> None:
        """Shut the server down; raise AssertionError if a request was wrong."""
        if self._thread is not None:
            self._httpd.shutdown()
            self._httpd.server_close()
            self._thread.join()
            self._thread = None
        with self._lock:
            failures, self._failures = self._failures, []
        if failures:
            raise AssertionError("\n".join(failures))

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()