"""
pytest configuration and fixtures.
"""

import shutil
import ssl
import subprocess
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Generator, Tuple
from urllib.parse import parse_qs, urlparse

import pytest

from core.config import AppSettings


class EchoHandler(BaseHTTPRequestHandler):
    """Echoes the request body and reports request details in X-Echo-* headers.

    `?status=N` picks the response status.
    """

    def _read_body(self) -> bytes:
        if self.headers.get("Transfer-Encoding", "").lower() == "chunked":
            chunks = []
            while True:
                size = int(self.rfile.readline().strip(), 16)
                if size == 0:
                    self.rfile.readline()
                    break
                chunks.append(self.rfile.read(size))
                self.rfile.readline()
            return b"".join(chunks)
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length else b""

    def _reply(self) -> None:
        parsed = urlparse(self.path)
        status = int(parse_qs(parsed.query).get("status", ["200"])[0])
        body = self._read_body()

        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("X-Echo-Method", self.command)
        self.send_header("X-Echo-Path", parsed.path)
        self.send_header("X-Echo-Authorization", self.headers.get("Authorization", "<none>"))
        self.send_header("X-Echo-Transfer-Encoding", self.headers.get("Transfer-Encoding", "<none>"))
        self.send_header("Set-Cookie", "a=1")
        self.send_header("Set-Cookie", "b=2")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    do_GET = _reply
    do_POST = _reply

    def log_message(self, format, *args):
        pass


@pytest.fixture(scope="session")
def echo_port() -> Generator[int, None, None]:
    """Port of an echo server running in a background thread."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server.server_address[1]

    server.shutdown()
    server.server_close()
    thread.join(timeout=5.0)


def generate_self_signed_cert(cert_dir: Path) -> Tuple[str, str]:
    """Self-signed certificate for localhost/127.0.0.1, made with the openssl CLI."""
    cert_path = cert_dir / "stub-cert.pem"
    key_path = cert_dir / "stub-key.pem"
    subprocess.run(
        [
            "openssl", "req", "-x509", "-newkey", "rsa:2048", "-nodes",
            "-keyout", str(key_path), "-out", str(cert_path),
            "-days", "1", "-subj", "/CN=localhost",
            "-addext", "subjectAltName=DNS:localhost,IP:127.0.0.1",
        ],
        check=True,
        capture_output=True,
    )
    return str(cert_path), str(key_path)


@pytest.fixture(scope="session")
def tls_echo_port(tmp_path_factory) -> Generator[int, None, None]:
    """Port of the echo server behind TLS with a self-signed certificate."""
    if shutil.which("openssl") is None:
        pytest.skip("openssl not found")
    cert_path, key_path = generate_self_signed_cert(tmp_path_factory.mktemp("certs"))

    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoHandler)
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(cert_path, key_path)
    server.socket = context.wrap_socket(server.socket, server_side=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server.server_address[1]

    server.shutdown()
    server.server_close()
    thread.join(timeout=5.0)


@pytest.fixture
def settings(echo_port: int) -> AppSettings:
    """Settings whose defaults point at the echo server."""
    return AppSettings(
        default_host="127.0.0.1",
        default_stubs_port=echo_port,
        http_timeout_seconds=5.0,
    )
