"""HTTP Listener - Accepts show/hide/shutdown commands from mpv."""

import json
import logging
import os
import socket
import threading
from typing import Optional, Protocol

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from lookup_overlay.core import LookupRequest
from lookup_overlay.errors import ListenerBindError

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


class RelayCommands(Protocol):
    """What the listener needs from the relay. Calls arrive on the listener thread."""

    def request_lookup(self, request: LookupRequest) -> None: ...

    def request_hide(self) -> None: ...

    def request_shutdown(self) -> None: ...


def create_app(commands: RelayCommands) -> FastAPI:
    """
    Build the relay's HTTP app.

    Every request is acknowledged with a fixed plain-text body; malformed
    lookups are acknowledged too but trigger nothing.
    """
    app = FastAPI(title="lookup-overlay relay", docs_url=None, redoc_url=None, openapi_url=None)

    @app.api_route("/{path:path}", methods=ALL_METHODS, response_class=PlainTextResponse)
    async def handle(request: Request) -> str:
        path = request.url.path
        logger.info("[IPC] Request: %s %s", request.method, path)

        if request.method != "POST":
            return "ready"

        if path == "/shutdown":
            logger.info("[IPC] Shutdown signal received")
            commands.request_shutdown()
            return "closing"

        if path == "/hide":
            logger.info("[IPC] Hide signal received")
            commands.request_hide()
            return "hidden"

        if path != "/":
            logger.warning("[IPC] Ignoring POST to unknown path %s", path)
            return "ok"

        body = await request.body()
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            logger.error("[IPC] Failed to parse request body: %s", exc)
            return "ok"

        lookup = LookupRequest.from_payload(payload)
        if lookup is None:
            logger.warning("[IPC] Request body has no term, ignoring")
            return "ok"

        logger.info("[IPC] Lookup for: %s", lookup.term)
        commands.request_lookup(lookup)
        return "ok"

    return app


def bind_listener(host: str, port: int) -> socket.socket:
    """
    Bind the listener socket up front.

    Raises:
        ListenerBindError: if the address is taken, i.e. another overlay is running.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    if os.name != "nt":
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        raise ListenerBindError(host, port, str(exc)) from exc
    sock.set_inheritable(True)
    return sock


class RelayListener:
    """Serves the relay app with uvicorn on a daemon thread."""

    def __init__(self, commands: RelayCommands, host: str = "127.0.0.1", port: int = 19634):
        self.host = host
        self.port = port
        self.app = create_app(commands)
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Bind and start serving. Raises ListenerBindError on a port conflict."""
        sock = bind_listener(self.host, self.port)
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_config=None,
            access_log=False,
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run,
            kwargs={"sockets": [sock]},
            name="relay-listener",
            daemon=True,
        )
        self._thread.start()
        logger.info("Lookup IPC server listening on %s:%s", self.host, self.port)

    def stop(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
