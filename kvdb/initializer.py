"""Wires the database and the TCP server together and runs them."""

from __future__ import annotations

import threading
from typing import Optional

from . import logger
from .configuration import Config
from .database import Database
from .tcp_server import TCPServer


class Initializer:
    """Builds the database and the server from a configuration."""

    def __init__(self, cfg: Optional[Config]) -> None:
        if cfg is None:
            raise ValueError("config is None")
        self.database = Database(cfg)
        logger.info("Database configured")
        self.server = TCPServer(cfg.network)
        logger.info("Server configured")

    def start_database(self, stop: threading.Event) -> bool:
        """Serve requests until ``stop`` is set; report whether shutdown was graceful."""
        self.database.start()
        logger.info("Database started")
        try:
            return self.server.handle_requests(stop, self.database.handle_request)
        finally:
            self.server.close()