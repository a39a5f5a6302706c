"""TCP front end: accepts connections and answers each message with a handler."""

from __future__ import annotations

import re
import socket
import threading
from typing import Callable

from . import logger
from .concurrency import Semaphore
from .configuration import NetworkConfig

Handler = Callable[[bytes], bytes]

LIMIT_EXCEEDED_MESSAGE = b"ERROR: Connection limit exceeded, try again later"

_POLL_INTERVAL = 0.1
_PORT = re.compile(r"[0-9]+")


class ServerStartError(OSError):
    """The listening socket could not be opened."""


def _open_listener(ip: str, port: str) -> socket.socket:
    try:
        if not _PORT.fullmatch(port) or int(port) > 65535:
            raise ValueError(f"invalid port {port!r}")
        family, *_, address = socket.getaddrinfo(
            ip or None,
            int(port),
            type=socket.SOCK_STREAM,
            flags=socket.AI_PASSIVE | socket.AI_NUMERICHOST,
        )[0]
        return socket.create_server(address, family=family)
    except (OSError, ValueError, UnicodeError) as exc:
        raise ServerStartError(f"unable to start listener: {exc}") from exc


class TCPServer:
    """Listens on the configured address and serves each connection in its own thread."""

    def __init__(self, cfg: NetworkConfig) -> None:
        self.cfg = cfg
        self._semaphore = Semaphore(cfg.max_connections)
        self._listener = _open_listener(cfg.ip, cfg.port)
        self._closed = threading.Event()
        self._active = 0
        self._idle = threading.Condition()

    def address(self) -> tuple[str, int]:
        """Host and port the server is listening on."""
        host, port = self._listener.getsockname()[:2]
        return host, port

    def close(self) -> None:
        """Stop listening; calling it again does nothing."""
        if self._closed.is_set():
            return
        self._closed.set()
        try:
            self._listener.close()
        except OSError as exc:
            logger.warn(f"error in listener.close(): {exc}")

    def __enter__(self) -> "TCPServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def handle_requests(self, stop: threading.Event, handler: Handler) -> bool:
        """Serve until ``stop`` is set, then shut down.

        Returns True if every open connection finished within the graceful
        shutdown timeout, False otherwise.
        """
        self._listener.settimeout(_POLL_INTERVAL)
        acceptor = threading.Thread(target=self._accept_loop, args=(stop, handler), daemon=True)
        acceptor.start()

        stop.wait()
        self.close()
        acceptor.join()

        with self._idle:
            finished = self._idle.wait_for(
                lambda: self._active == 0, timeout=self.cfg.graceful_shutdown_timeout
            )
        if finished:
            logger.info("All connections completed gracefully")
        else:
            logger.warn("Shutdown timeout reached, some connections may have been forcefully closed")
        return finished

    def _accept_loop(self, stop: threading.Event, handler: Handler) -> None:
        while True:
            try:
                conn, _ = self._listener.accept()
            except OSError as exc:
                if self._closed.is_set():
                    return
                if not isinstance(exc, socket.timeout):
                    logger.error(f"unable to accept connection: {exc}")
                continue

            if not self._semaphore.try_acquire():
                try:
                    conn.sendall(LIMIT_EXCEEDED_MESSAGE)
                except OSError as exc:
                    logger.error(f"unable to send message about connection limit exceeded: {exc}")
                conn.close()
                continue

            with self._idle:
                self._active += 1
            threading.Thread(target=self._serve, args=(conn, stop, handler), daemon=True).start()

    def _serve(self, conn: socket.socket, stop: threading.Event, handler: Handler) -> None:
        limit = self.cfg.max_message_size + 1
        try:
            with conn:
                conn.settimeout(self.cfg.idle_timeout)
                while not stop.is_set():
                    try:
                        data = conn.recv(limit)
                    except OSError as exc:
                        logger.error(f"unable to read from connection: {exc}")
                        return
                    if not data:
                        return
                    if len(data) == limit:
                        logger.error("message size exceeds limit")
                        return
                    try:
                        conn.sendall(handler(data))
                    except OSError as exc:
                        logger.error(f"unable to write to connection: {exc}")
                        return
        except Exception as exc:  # a failing handler must not bring the server down
            logger.error(f"captured panic: {exc!r}")
        finally:
            with self._idle:
                self._active -= 1
                self._idle.notify_all()
            self._semaphore.release()