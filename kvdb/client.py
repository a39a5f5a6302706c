"""Interactive command-line client for the key-value database server."""

from __future__ import annotations

import argparse
import re
import socket
import sys
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, TextIO

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "3223"
DEFAULT_TIMEOUT = 10.0
IO_TIMEOUT = 5.0
READ_BUFFER_SIZE = 4096
PROMPT = "kv-db> "
HISTORY_FILE = "/tmp/kv-db-history.tmp"


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    usage: str
    example: str


COMMANDS: dict[str, Command] = {
    "GET": Command("GET", "Retrieve value by key", "GET <key>", "GET mykey"),
    "SET": Command("SET", "Set key-value pair", "SET <key> <value>", "SET mykey myvalue"),
    "DEL": Command("DEL", "Delete key-value pair", "DEL <key>", "DEL mykey"),
    "HELP": Command("HELP", "Show available commands", "HELP [command]", "HELP GET"),
    "EXIT": Command("EXIT", "Exit the client", "EXIT", "EXIT"),
    "QUIT": Command("QUIT", "Exit the client", "QUIT", "QUIT"),
}


class ClientError(Exception):
    """Talking to the server failed."""


@dataclass
class ClientConfig:
    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT


class Client:
    """A connection to the server that sends one command and reads one reply."""

    def __init__(self, conn: Optional[socket.socket]) -> None:
        self.conn = conn

    def send_command(self, command: str) -> str:
        if self.conn is None:
            raise ClientError("failed to send command: connection is closed")
        try:
            self.conn.settimeout(IO_TIMEOUT)
        except OSError as exc:
            raise ClientError(f"failed to set write deadline: {exc}") from exc
        try:
            self.conn.sendall(command.encode("utf-8"))
        except OSError as exc:
            raise ClientError(f"failed to send command: {exc}") from exc
        try:
            data = self.conn.recv(READ_BUFFER_SIZE)
        except OSError as exc:
            raise ClientError(f"failed to read response: {exc}") from exc
        if not data:
            raise ClientError("failed to read response: EOF")
        return data.decode("utf-8", errors="replace")

    def send_get_command(self, key: str) -> str:
        return self.send_command(f"GET {key}\n")

    def send_set_command(self, key: str, value: str) -> str:
        return self.send_command(f"SET {key} {value}\n")

    def send_del_command(self, key: str) -> str:
        return self.send_command(f"DEL {key}\n")

    def close(self) -> None:
        if self.conn is not None:
            conn, self.conn = self.conn, None
            conn.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"([0-9]*\.?[0-9]*)(ns|us|µs|μs|ms|s|m|h)")


def _duration(text: str) -> float:
    """Parse a duration such as ``10s``, ``1m30s`` or ``500ms`` into seconds."""
    body = text
    sign = 1.0
    if body[:1] in ("+", "-"):
        sign = -1.0 if body[0] == "-" else 1.0
        body = body[1:]
    if body == "0":
        return 0.0
    if not body:
        raise argparse.ArgumentTypeError(f"invalid duration {text!r}")
    total = 0.0
    pos = 0
    while pos < len(body):
        match = _DURATION_PART.match(body, pos)
        if match is None or match.group(1) in ("", "."):
            raise argparse.ArgumentTypeError(f"invalid duration {text!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    return sign * total


def parse_args(argv: Optional[Sequence[str]] = None) -> ClientConfig:
    """Read host, port and connection timeout from the command line."""
    parser = argparse.ArgumentParser(prog="kvdb-client", description="KV-DB interactive client")
    parser.add_argument("-host", "--host", dest="host", default=DEFAULT_HOST,
                        help="Database server host")
    parser.add_argument("-port", "--port", dest="port", default=DEFAULT_PORT,
                        help="Database server port")
    parser.add_argument("-timeout", "--timeout", dest="timeout", type=_duration,
                        default=DEFAULT_TIMEOUT, help="Connection timeout, e.g. 10s")
    args = parser.parse_args(argv)
    return ClientConfig(host=args.host, port=args.port, timeout=args.timeout)


def connect(cfg: ClientConfig) -> Client:
    """Open a TCP connection to the configured server."""
    timeout = cfg.timeout if cfg.timeout > 0 else None
    try:
        port = int(cfg.port)
    except ValueError as exc:
        raise ClientError(f"invalid port {cfg.port!r}") from exc
    try:
        conn = socket.create_connection((cfg.host, port), timeout=timeout)
    except OSError as exc:
        raise ClientError(str(exc)) from exc
    return Client(conn)


def completer_items() -> list[str]:
    """Command names offered for completion, in sorted order."""
    return sorted(COMMANDS)


def _out(out: Optional[TextIO]) -> TextIO:
    return sys.stdout if out is None else out


def process_command(line: str, client: Client, out: Optional[TextIO] = None) -> bool:
    """Run one input line; return True when the client should exit."""
    stream = _out(out)
    parts = line.split()
    if not parts:
        return False
    cmd, args = parts[0].upper(), parts[1:]
    if cmd == "HELP":
        handle_help(args, stream)
    elif cmd in ("EXIT", "QUIT"):
        print("Goodbye!", file=stream)
        return True
    elif cmd == "GET":
        handle_get(args, client, stream)
    elif cmd == "SET":
        handle_set(args, client, stream)
    elif cmd == "DEL":
        handle_del(args, client, stream)
    else:
        print(f"Unknown command: {cmd}", file=stream)
        print("Type 'HELP' for available commands", file=stream)
    return False


def handle_help(args: Sequence[str], out: Optional[TextIO] = None) -> None:
    stream = _out(out)
    if not args:
        print("Available commands:", file=stream)
        print(file=stream)
        for name in completer_items():
            command = COMMANDS[name]
            print(f"  {command.name:<8} {command.description}", file=stream)
        print(file=stream)
        print("Use 'HELP <command>' for detailed information about a specific command",
              file=stream)
        return

    name = args[0].upper()
    command = COMMANDS.get(name)
    if command is None:
        print(f"Unknown command: {name}", file=stream)
        print("Type 'HELP' to see all available commands", file=stream)
        return
    print(f"Command: {command.name}", file=stream)
    print(f"Description: {command.description}", file=stream)
    print(f"Usage: {command.usage}", file=stream)
    print(f"Example: {command.example}", file=stream)


def handle_get(args: Sequence[str], client: Client, out: Optional[TextIO] = None) -> None:
    stream = _out(out)
    if len(args) != 1:
        print("Error: GET requires exactly one argument", file=stream)
        print("Usage: GET <key>", file=stream)
        return
    try:
        result = client.send_get_command(args[0])
    except ClientError as exc:
        print(f"Error sending GET command: {exc}", file=stream)
        return
    print(f"Value: {result}", file=stream)


def handle_set(args: Sequence[str], client: Client, out: Optional[TextIO] = None) -> None:
    stream = _out(out)
    if len(args) != 2:
        print("Error: SET requires exactly two arguments", file=stream)
        print("Usage: SET <key> <value>", file=stream)
        return
    try:
        result = client.send_set_command(args[0], args[1])
    except ClientError as exc:
        print(f"Error sending SET command: {exc}", file=stream)
        return
    print(result, file=stream)


def handle_del(args: Sequence[str], client: Client, out: Optional[TextIO] = None) -> None:
    stream = _out(out)
    if len(args) != 1:
        print("Error: DEL requires exactly one argument", file=stream)
        print("Usage: DEL <key>", file=stream)
        return
    try:
        result = client.send_del_command(args[0])
    except ClientError as exc:
        print(f"Error sending DEL command: {exc}", file=stream)
        return
    print(result, file=stream)


def _fallback(client: Client, lines: Iterable[str], out: TextIO) -> None:
    """Line-by-line loop without completion or history."""
    print("Using fallback mode (no autocomplete)", file=out)
    source = iter(lines)
    while True:
        print(PROMPT, end="", file=out, flush=True)
        raw = next(source, None)
        if raw is None:
            break
        line = raw.strip()
        if line and process_command(line, client, out):
            break


def _interactive(client: Client, out: TextIO) -> None:
    """Loop with tab completion of command names and a history file."""
    try:
        import readline
    except ImportError:
        _fallback(client, sys.stdin, out)
        return

    def complete(text: str, state: int) -> Optional[str]:
        if " " in readline.get_line_buffer().lstrip():
            return None
        matches = [name for name in completer_items() if name.startswith(text.upper())]
        return matches[state] if state < len(matches) else None

    readline.set_completer(complete)
    readline.parse_and_bind("tab: complete")
    try:
        readline.read_history_file(HISTORY_FILE)
    except OSError:
        pass
    try:
        while True:
            try:
                line = input(PROMPT).strip()
            except KeyboardInterrupt:
                print("^C", file=out)
                break
            except EOFError:
                print("exit", file=out)
                break
            if line and process_command(line, client, out):
                break
    finally:
        try:
            readline.write_history_file(HISTORY_FILE)
        except OSError:
            pass


def main(argv: Optional[Sequence[str]] = None) -> int:
    print("KV-DB Client")
    print("Type 'HELP' for available commands or 'EXIT'/'QUIT' to quit")
    print()

    cfg = parse_args(argv)
    try:
        client = connect(cfg)
    except ClientError as exc:
        print(f"Error connecting to server: {exc}")
        return 0

    with client:
        if sys.stdin.isatty():
            _interactive(client, sys.stdout)
        else:
            _fallback(client, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())