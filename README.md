# kvdb

A small in-memory key-value database. It runs as a TCP server that
understands three plain-text commands, and it comes with an interactive
command-line client.

## Installation

```
pip install .
```

## Running the server

The server reads its settings from a YAML file whose path is given in the
`CONFIG_FILEPATH` environment variable:

```yaml
engine:
  type: in_memory
logging:
  level: info          # debug, info, warn, error or fatal
  output: stdout       # stdout, stderr or a file path; empty means stdout
network:
  ip: 127.0.0.1
  port: 3223           # 1024 to 65535
  max_connections: 100 # 1 to 10000
  max_message_size: 1024
  idle_timeout: 30     # seconds, at least 1
  graceful_shutdown_timeout: 5
```

```
CONFIG_FILEPATH=config.yaml kvdb-server
```

If `CONFIG_FILEPATH` is not set, or the file cannot be read or fails
validation, the server prints the problem to standard error and exits with
status 1. Every setting shown above is required; `logging.output` may be
left out.

The server stops on SIGINT or SIGTERM. It stops accepting new connections
and waits up to `graceful_shutdown_timeout` seconds for open ones to finish.

When `max_connections` clients are already connected, a new connection
receives `ERROR: Connection limit exceeded, try again later` and is closed.
A message longer than `max_message_size` bytes closes the connection, as
does a connection left idle for longer than `idle_timeout` seconds.

## Protocol

Each message read from a connection is one command, with its words
separated by whitespace. Command names are upper case and case sensitive.

| Command             | Reply on success |
|---------------------|------------------|
| `GET <key>`         | the value        |
| `SET <key> <value>` | `OK`             |
| `DEL <key>`         | `OK`             |

Errors come back as text: `empty command`, `unknown command`,
`invalid arguments number`, and `key not found` for a `GET` of a key that
is not stored. Deleting a key that is not stored still answers `OK`.

## Using the client

```
kvdb-client --host 127.0.0.1 --port 3223 --timeout 10s
```

`--host` defaults to `127.0.0.1` and `--port` to `3223`. `--timeout` sets
how long to wait for the connection and takes durations such as `10s`,
`500ms` or `1m30s` (ten seconds by default). The single-dash forms
`-host`, `-port` and `-timeout` work as well.

```
kv-db> SET greeting hello
OK
kv-db> GET greeting
Value: hello
kv-db> DEL greeting
OK
kv-db> HELP GET
Command: GET
Description: Retrieve value by key
Usage: GET <key>
Example: GET mykey
kv-db> EXIT
Goodbye!
```

`HELP` lists every command; `HELP <command>` shows its usage and an
example. `EXIT` or `QUIT` leaves the client, as does end of input.
Command names typed in the client are not case sensitive. On a terminal
the client completes command names with Tab and keeps its history in
`/tmp/kv-db-history.tmp`; when input is not a terminal it reads commands
line by line.

## Using it from Python

The pieces of the server can be used on their own:

```python
from kvdb.compute import Compute, CommandID
from kvdb.in_memory import InMemoryEngine, KeyNotFoundError

engine = InMemoryEngine()
engine.set("greeting", "hello")
print(engine.get("greeting"))   # hello
engine.delete("greeting")

query = Compute().parse("SET greeting hello")
assert query.command_id is CommandID.SET
assert query.arguments == ("greeting", "hello")
```

`kvdb.database.Database` takes a `kvdb.configuration.Config` and answers
raw request bytes with reply bytes through `handle_request`.
`kvdb.configuration.parse_config`, `load_config` and `new_config` read and
validate the YAML settings, raising `ConfigError` on any problem.

## Limits

Data lives only in the server's memory: nothing is written to disk, and
every key is lost when the server stops. `in_memory` is the only storage
engine.

## Tests

```
pip install .[test]
pytest
```