"""Local preview server for a built site."""

from __future__ import annotations

import http.server
import logging
from functools import partial
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


class _QuietHandler(http.server.SimpleHTTPRequestHandler):
    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


def create_server(output_dir: Path, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> http.server.ThreadingHTTPServer:
    """Create (but do not start) an HTTP server rooted at ``output_dir``."""
    handler = partial(_QuietHandler, directory=str(output_dir))
    return http.server.ThreadingHTTPServer((host, port), handler)


def serve_site(output_dir: Path, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Serve ``output_dir`` until interrupted."""
    with create_server(output_dir, host, port) as httpd:
        logger.info("Serving %s at http://%s:%d/", output_dir, host, httpd.server_address[1])
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Stopped preview server")


__all__ = ["DEFAULT_HOST", "DEFAULT_PORT", "create_server", "serve_site"]
