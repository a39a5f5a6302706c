"""In-memory key-value database: a TCP server with a plain-text protocol and an interactive client."""

__version__ = "0.1.0"