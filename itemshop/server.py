"""HTTP server for a single shop service, with health check and graceful shutdown."""

from __future__ import annotations

import dataclasses
import json
import logging
import signal
import sys
import threading
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from flask import Flask, Response, abort, request
from werkzeug.exceptions import HTTPException
from werkzeug.serving import make_server

from itemshop.config import ConfigError, load_config
from itemshop.database import DatabaseError, db_conn
from itemshop.services import ServiceName, build_middleware, build_service

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0
TIMEOUT_MESSAGE = "Error: request timeout"
BODY_LIMIT = 10 * 1024 * 1024
ALLOW_METHODS = ("GET", "HEAD", "PUT", "PATCH", "POST", "DELETE")


def _json_default(obj):
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, ObjectId):
        return str(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"cannot encode {type(obj).__name__}")


def _plain(data):
    to_dict = getattr(data, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    return data


def _json_response(status_code: int, data) -> Response:
    body = json.dumps(_plain(data), default=_json_default) + "\n"
    return Response(body, status=status_code, mimetype="application/json")


def err_response(status_code: int, message: str) -> Response:
    """Return a JSON ``{"message": ...}`` response with the given status."""
    return _json_response(status_code, {"message": message})


def success_response(status_code: int, data) -> Response:
    """Return ``data`` as a JSON response with the given status."""
    return _json_response(status_code, data)


class _TimeoutMiddleware:
    """Answer 503 when the wrapped application takes longer than ``timeout``."""

    def __init__(self, app, timeout: float, message: str):
        self.app = app
        self.timeout = timeout
        self.message = message

    def __call__(self, environ, start_response):
        result: dict = {}
        done = threading.Event()

        def run():
            chunks: list = []

            def capture(status, headers, exc_info=None):
                result["status"] = status
                result["headers"] = headers
                return chunks.append

            try:
                iterable = self.app(environ, capture)
                try:
                    chunks.extend(iterable)
                finally:
                    close = getattr(iterable, "close", None)
                    if close is not None:
                        close()
                result["body"] = chunks
            except BaseException as exc:  # re-raised in the calling thread
                result["error"] = exc
            finally:
                done.set()

        threading.Thread(target=run, daemon=True).start()
        if not done.wait(self.timeout):
            body = self.message.encode("utf-8")
            start_response(
                "503 Service Unavailable",
                [("Content-Type", "text/plain; charset=utf-8"), ("Content-Length", str(len(body)))],
            )
            return [body]
        if "error" in result:
            raise result["error"]
        start_response(result["status"], result["headers"])
        return result["body"]


def _split_address(url: str) -> tuple:
    host, sep, port = url.rpartition(":")
    if not sep or not port:
        raise ValueError(f"invalid listen address: {url!r}")
    return host.strip("[]") or "0.0.0.0", int(port)


class Server:
    """One service's HTTP application and its listener."""

    def __init__(self, config, client, *, request_timeout: float = REQUEST_TIMEOUT):
        self.config = config
        self.client = client
        self.middleware = build_middleware(config)
        self.app = Flask(config.app.name or __name__)
        self.app.config["MAX_CONTENT_LENGTH"] = BODY_LIMIT
        self._http = None
        self._ready = threading.Event()

        self.app.before_request(self._check_body_limit)
        self.app.before_request(self._cors_preflight)
        self.app.after_request(self._cors_headers)
        self.app.after_request(self._log_request)
        self.app.register_error_handler(HTTPException, self._http_error)
        self.app.wsgi_app = _TimeoutMiddleware(self.app.wsgi_app, request_timeout, TIMEOUT_MESSAGE)

        self.service = None
        if config.app.name in {name.value for name in ServiceName}:
            self.service = build_service(config.app.name, config, client)
            self.app.add_url_rule(
                f"/{self.service.name.value}_v1",
                endpoint="health_check",
                view_func=self.health_check,
                methods=["GET"],
            )

    @staticmethod
    def _check_body_limit():
        length = request.content_length
        if length is not None and length > BODY_LIMIT:
            abort(413)

    @staticmethod
    def _cors_preflight():
        if request.method != "OPTIONS" or "Access-Control-Request-Method" not in request.headers:
            return None
        response = Response(status=204)
        response.vary.update(
            ["Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers"]
        )
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = ",".join(ALLOW_METHODS)
        requested = request.headers.get("Access-Control-Request-Headers")
        if requested:
            response.headers["Access-Control-Allow-Headers"] = requested
        return response

    @staticmethod
    def _cors_headers(response):
        response.vary.add("Origin")
        if request.headers.get("Origin"):
            response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @staticmethod
    def _log_request(response):
        logger.info("%s %s %s", request.method, request.path, response.status_code)
        return response

    @staticmethod
    def _http_error(exc: HTTPException):
        return err_response(exc.code or 500, exc.name)

    def health_check(self) -> Response:
        """Report the service name and an OK status."""
        return success_response(200, {"app": self.config.app.name, "status": "OK"})

    @property
    def server_address(self) -> Optional[tuple]:
        """The bound (host, port) while serving, else None."""
        return None if self._http is None else self._http.server_address

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listener is bound; return whether it is."""
        return self._ready.wait(timeout)

    def serve(self) -> None:
        """Listen on the configured address until shut down."""
        host, port = _split_address(self.config.app.url)
        self._http = make_server(host, port, self.app, threaded=True)
        logger.info("Start service: %s", self.config.app.name)
        self._ready.set()
        try:
            self._http.serve_forever()
        finally:
            self._http.server_close()

    def shutdown(self) -> None:
        """Stop the listener; does nothing if it never started."""
        http = self._http
        if http is None:
            return
        logger.info("Shutting down service: %s", self.config.app.name)
        http.shutdown()


def create_app(config, client) -> Flask:
    """Build the WSGI application for the configured service."""
    return Server(config, client).app


def _install_signal_handlers(server: Server) -> dict:
    if threading.current_thread() is not threading.main_thread():
        return {}

    def handle(signum, frame):
        threading.Thread(target=server.shutdown, daemon=True).start()

    return {sig: signal.signal(sig, handle) for sig in (signal.SIGINT, signal.SIGTERM)}


def start(config, client) -> None:
    """Serve the configured service until SIGINT or SIGTERM."""
    server = Server(config, client)
    previous = _install_signal_handlers(server)
    try:
        server.serve()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def main(argv=None) -> int:
    """Load the env file named on the command line and run its service."""
    logging.basicConfig(level=logging.INFO)
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        logger.error("Please provide the path to the .env file as a command line argument")
        return 1
    try:
        config = load_config(args[0])
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1
    try:
        client = db_conn(config)
    except DatabaseError as exc:
        logger.error("%s", exc)
        return 1
    try:
        start(config, client)
    except (OSError, ValueError) as exc:
        logger.error("Error: %s", exc)
        return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())