"""Server configuration: loading a YAML file and validating it."""

from __future__ import annotations

import ipaddress
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

ENGINE_IN_MEMORY = "in_memory"
LOG_LEVELS = ("debug", "info", "warn", "error", "fatal")
CONFIG_ENV_VAR = "CONFIG_FILEPATH"

_NULLS = frozenset({"", "~", "null", "Null", "NULL"})
_DECIMAL = re.compile(r"[+-]?[0-9]+")


class ConfigError(ValueError):
    """The configuration could not be read or is not valid."""

    def __init__(self, message: str, problems: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.problems = list(problems) if problems else [message]


class ConfigFileMissingError(ConfigError):
    """No configuration file path was given."""

    def __init__(self) -> None:
        super().__init__(f"no config file path provided, set {CONFIG_ENV_VAR} env variable")


@dataclass
class EngineConfig:
    type: str = ""


@dataclass
class LoggingConfig:
    level: str = ""
    output: str = ""


@dataclass
class NetworkConfig:
    ip: str = ""
    port: str = ""
    max_connections: int = 0
    max_message_size: int = 0
    idle_timeout: int = 0
    graceful_shutdown_timeout: int = 0


@dataclass
class Config:
    engine: EngineConfig = field(default_factory=EngineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)


def _is_null(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and raw in _NULLS)


def _section(raw: Any, name: str) -> Mapping[str, Any]:
    if _is_null(raw):
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{name}: expected a mapping")
    return raw


def _string(section: Mapping[str, Any], key: str, name: str) -> str:
    raw = section.get(key)
    if _is_null(raw):
        return ""
    if not isinstance(raw, str):
        raise ConfigError(f"{name}.{key}: expected a scalar value")
    return raw


def _integer(section: Mapping[str, Any], key: str, name: str) -> int:
    raw = _string(section, key, name).strip()
    if not raw:
        return 0
    try:
        return int(raw) if _DECIMAL.fullmatch(raw) else int(raw, 0)
    except ValueError as exc:
        raise ConfigError(f"{name}.{key}: cannot parse {raw!r} as an integer") from exc


def _valid_ip(text: str) -> bool:
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return "%" not in text


def _valid_port(text: str) -> bool:
    return bool(_DECIMAL.fullmatch(text)) and 1024 <= int(text) <= 65535


def _validate(config: Config) -> None:
    net = config.network
    checks = [
        (config.engine.type == ENGINE_IN_MEMORY, f"engine.type: must be {ENGINE_IN_MEMORY}"),
        (config.logging.level in LOG_LEVELS, f"logging.level: must be one of {', '.join(LOG_LEVELS)}"),
        (_valid_ip(net.ip), "network.ip: must be a valid IP address"),
        (_valid_port(net.port), "network.port: must be a number from 1024 to 65535"),
        (1 <= net.max_connections <= 10000, "network.max_connections: must be from 1 to 10000"),
        (net.max_message_size >= 1, "network.max_message_size: must be at least 1"),
        (net.idle_timeout >= 1, "network.idle_timeout: must be at least 1"),
        (net.graceful_shutdown_timeout >= 0, "network.graceful_shutdown_timeout: must not be negative"),
    ]
    problems = [message for ok, message in checks if not ok]
    if problems:
        raise ConfigError("; ".join(problems), problems)


def parse_config(data: Union[str, bytes]) -> Config:
    """Parse and validate a YAML configuration document."""
    try:
        # Scalars stay text so that each field is converted as declared.
        document = yaml.load(data, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML: {exc}") from exc

    root = _section(document, "config")
    engine = _section(root.get("engine"), "engine")
    log = _section(root.get("logging"), "logging")
    net = _section(root.get("network"), "network")

    config = Config(
        engine=EngineConfig(type=_string(engine, "type", "engine")),
        logging=LoggingConfig(
            level=_string(log, "level", "logging"),
            output=_string(log, "output", "logging"),
        ),
        network=NetworkConfig(
            ip=_string(net, "ip", "network"),
            port=_string(net, "port", "network"),
            max_connections=_integer(net, "max_connections", "network"),
            max_message_size=_integer(net, "max_message_size", "network"),
            idle_timeout=_integer(net, "idle_timeout", "network"),
            graceful_shutdown_timeout=_integer(net, "graceful_shutdown_timeout", "network"),
        ),
    )
    _validate(config)
    return config


def load_config(path: Union[str, os.PathLike]) -> Config:
    """Read, parse and validate the configuration file at ``path``."""
    return parse_config(Path(path).read_bytes())


def new_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Load the configuration named by the CONFIG_FILEPATH environment variable."""
    path = (os.environ if environ is None else environ).get(CONFIG_ENV_VAR, "")
    if not path:
        raise ConfigFileMissingError()
    return load_config(path)