"""A WSGI static file server that sets content types for common web assets."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from typing import Any

from werkzeug.exceptions import NotFound
from werkzeug.security import safe_join
from werkzeug.utils import send_file

MIME_TYPES = {
    ".js": "application/javascript",
    ".css": "text/css",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".gif": "image/gif",
}

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]


def _serve_path(root: str, path: str, environ: dict, content_type: str | None = None) -> Any:
    """Return a response for path under root, or a NotFound exception."""
    target = safe_join(os.fspath(root), path.lstrip("/")) if path.strip("/") else os.fspath(root)
    if target is None:
        return NotFound()
    if os.path.isdir(target):
        target = os.path.join(target, "index.html")
    if not os.path.isfile(target):
        return NotFound()
    response = send_file(target, environ)
    if content_type:
        response.headers["Content-Type"] = content_type
    return response


def static_file_server(root: str) -> WSGIApp:
    """Return a WSGI app serving files under root with fixed asset content types."""

    def app(environ: dict, start_response: Callable) -> Iterable[bytes]:
        path = environ.get("PATH_INFO", "") or "/"
        content_type = MIME_TYPES.get(os.path.splitext(path)[1])
        return _serve_path(root, path, environ, content_type)(environ, start_response)

    return app