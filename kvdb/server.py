"""Command that runs the database server."""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from typing import Optional, Sequence

from . import logger
from .configuration import CONFIG_ENV_VAR, ConfigError, new_config
from .initializer import Initializer

_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def main(argv: Optional[Sequence[str]] = None) -> int:
    argparse.ArgumentParser(
        prog="kvdb-server",
        description=f"Run the key-value database server configured by ${CONFIG_ENV_VAR}.",
    ).parse_args(argv)

    try:
        cfg = new_config()
    except (ConfigError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1

    logger.configure(cfg.logging)
    logger.info("Parse config")

    try:
        initializer = Initializer(cfg)
    except (OSError, ValueError) as exc:
        logger.fatal(str(exc))

    stop = threading.Event()
    previous = {}
    if threading.current_thread() is threading.main_thread():
        previous = {sig: signal.signal(sig, lambda *_: stop.set()) for sig in _SIGNALS}
    try:
        logger.info("Start database")
        initializer.start_database(stop)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
    return 0


if __name__ == "__main__":
    sys.exit(main())