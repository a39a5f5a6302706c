import socket
import threading

import pytest

from kvdb.configuration import Config, EngineConfig, LoggingConfig, NetworkConfig
from kvdb.initializer import Initializer
from kvdb.storage import UnknownEngineError


def _config(engine="in_memory"):
    return Config(
        engine=EngineConfig(type=engine),
        logging=LoggingConfig(level="info", output="stdout"),
        network=NetworkConfig(
            ip="127.0.0.1",
            port="0",
            max_connections=5,
            max_message_size=1024,
            idle_timeout=5,
            graceful_shutdown_timeout=1,
        ),
    )


def _request(conn, text):
    conn.sendall(text.encode())
    return conn.recv(1024)


def test_none_config_is_rejected():
    with pytest.raises(ValueError):
        Initializer(None)


def test_unknown_engine_is_rejected():
    with pytest.raises(UnknownEngineError, match="unknown engine type"):
        Initializer(_config(engine="bad"))


def test_serves_commands_until_stopped():
    initializer = Initializer(_config())
    address = initializer.server.address()
    stop = threading.Event()
    outcome = {}
    thread = threading.Thread(
        target=lambda: outcome.update(graceful=initializer.start_database(stop)), daemon=True
    )
    thread.start()
    try:
        with socket.create_connection(address, timeout=2) as conn:
            assert _request(conn, "SET name alice\n") == b"OK"
            assert _request(conn, "GET name\n") == b"alice"
            assert _request(conn, "GET\n") == b"invalid arguments number"
            assert _request(conn, "FETCH name\n") == b"unknown command"
            assert _request(conn, "DEL name\n") == b"OK"
            assert _request(conn, "GET name\n") == b"key not found"
    finally:
        stop.set()
        thread.join(10)

    assert not thread.is_alive()
    assert outcome["graceful"] is True
    with pytest.raises(ConnectionRefusedError):
        socket.create_connection(address, timeout=2)


def test_values_are_shared_between_connections():
    initializer = Initializer(_config())
    address = initializer.server.address()
    stop = threading.Event()
    thread = threading.Thread(target=initializer.start_database, args=(stop,), daemon=True)
    thread.start()
    try:
        with socket.create_connection(address, timeout=2) as writer:
            assert _request(writer, "SET shared value\n") == b"OK"
        with socket.create_connection(address, timeout=2) as reader:
            assert _request(reader, "GET shared\n") == b"value"
    finally:
        stop.set()
        thread.join(10)
    assert not thread.is_alive()