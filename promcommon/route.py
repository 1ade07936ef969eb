"""A WSGI router with path prefixes, request parameters and instrumentation."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from typing import Any

from werkzeug.exceptions import HTTPException
from werkzeug.routing import Map, Rule
from werkzeug.utils import redirect

from promcommon.server import _serve_path

PARAMS_KEY = "promcommon.route.params"

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]
Instrumentation = Callable[[str, WSGIApp], WSGIApp]


def param(environ: dict, name: str) -> str:
    """Return the named request parameter, or "" when it is absent."""
    return environ.get(PARAMS_KEY, {}).get(name, "")


def with_param(environ: dict, name: str, value: str) -> dict:
    """Return a copy of environ with parameter name set to value."""
    result = dict(environ)
    result[PARAMS_KEY] = {**environ.get(PARAMS_KEY, {}), name: value}
    return result


def _to_rule(path: str) -> tuple[str, set[str]]:
    catch_all: set[str] = set()
    segments = []
    for segment in path.split("/"):
        if segment.startswith(":"):
            segments.append(f"<{segment[1:]}>")
        elif segment.startswith("*"):
            catch_all.add(segment[1:])
            segments.append(f"<path:{segment[1:]}>")
        else:
            segments.append(segment)
    return "/".join(segments), catch_all


class _Registry:
    def __init__(self) -> None:
        self.map = Map()
        self.handlers: list[tuple[WSGIApp, set[str]]] = []

    def add(self, method: str, path: str, handler: WSGIApp) -> None:
        rule, catch_all = _to_rule(path)
        endpoint = len(self.handlers)
        self.handlers.append((handler, catch_all))
        self.map.add(Rule(rule, endpoint=endpoint, methods=[method]))


class Router:
    """Routes WSGI requests to handlers; derived routers share one route table."""

    def __init__(
        self,
        _registry: _Registry | None = None,
        _prefix: str = "",
        _instrument: Instrumentation | None = None,
    ) -> None:
        self._registry = _registry or _Registry()
        self._prefix = _prefix
        self._instrument = _instrument

    def with_instrumentation(self, instrument: Instrumentation) -> "Router":
        """Return a router that wraps handlers with instrument, after existing wrappers."""
        previous = self._instrument
        combined = instrument
        if previous is not None:

            def combined(name: str, handler: WSGIApp) -> WSGIApp:
                return instrument(name, previous(name, handler))

        return Router(self._registry, self._prefix, combined)

    def with_prefix(self, prefix: str) -> "Router":
        """Return a router that prefixes all registered paths with prefix."""
        return Router(self._registry, self._prefix + prefix, self._instrument)

    def _handle(self, name: str, handler: WSGIApp) -> WSGIApp:
        if self._instrument is not None:
            handler = self._instrument(name, handler)
        return handler

    def _register(self, method: str, path: str, handler: WSGIApp) -> None:
        self._registry.add(method, self._prefix + path, self._handle(path, handler))

    def get(self, path: str, handler: WSGIApp) -> None:
        """Register a GET route."""
        self._register("GET", path, handler)

    def options(self, path: str, handler: WSGIApp) -> None:
        """Register an OPTIONS route."""
        self._register("OPTIONS", path, handler)

    def delete(self, path: str, handler: WSGIApp) -> None:
        """Register a DELETE route."""
        self._register("DELETE", path, handler)

    def put(self, path: str, handler: WSGIApp) -> None:
        """Register a PUT route."""
        self._register("PUT", path, handler)

    def post(self, path: str, handler: WSGIApp) -> None:
        """Register a POST route."""
        self._register("POST", path, handler)

    def redirect(self, environ: dict, path: str, code: int) -> Any:
        """Return a redirect response to the absolute path under this router's prefix."""
        return redirect(self._prefix + path, code)

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        adapter = self._registry.map.bind_to_environ(environ)
        try:
            endpoint, values = adapter.match()
        except HTTPException as exc:
            return exc(environ, start_response)
        handler, catch_all = self._registry.handlers[endpoint]
        params = dict(environ.get(PARAMS_KEY, {}))
        for key, value in values.items():
            params[key] = "/" + value if key in catch_all else value
        return handler({**environ, PARAMS_KEY: params}, start_response)


def file_serve(directory: str | os.PathLike) -> WSGIApp:
    """Return a handler serving files from directory by the filepath parameter."""

    def app(environ: dict, start_response: Callable) -> Iterable[bytes]:
        path = param(environ, "filepath")
        return _serve_path(os.fspath(directory), path, environ)(environ, start_response)

    return app