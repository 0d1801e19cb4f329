import os
import logging
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_UI_PORT = 8501


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass
class ClientConfig:
    """Runtime settings shared by the CLI and the UI."""

    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    download_dir: str = "."
    log_level: str = "WARNING"
    ui_host: str = "0.0.0.0"
    ui_port: int = DEFAULT_UI_PORT

    @classmethod
    def from_env(cls) -> "ClientConfig":
        log_level = os.getenv("FTCLIENT_LOG_LEVEL", "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"FTCLIENT_LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            connect_timeout=_env_float("FTCLIENT_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            poll_interval=_env_float("FTCLIENT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            download_dir=os.getenv("FTCLIENT_DOWNLOAD_DIR", "."),
            log_level=log_level,
            ui_host=os.getenv("FTCLIENT_UI_HOST", "0.0.0.0"),
            ui_port=_env_int("FTCLIENT_UI_PORT", DEFAULT_UI_PORT),
        )
