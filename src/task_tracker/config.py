"""Load service configuration from defaults, an optional YAML file and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from .constants import (
    CONFIG_FILE,
    DATA_FILE,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    ENV_DATA_FILE,
    ENV_HOST,
    ENV_LOG_LEVEL,
    ENV_PORT,
)
from .io_utils import _load_data_with_error

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class TrackerConfig:
    data_file: Path = field(default_factory=lambda: Path(DATA_FILE))
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL


def _coerce_port(raw: Any) -> Optional[int]:
    try:
        port = int(raw)
    except (TypeError, ValueError):
        return None
    return port if 0 < port < 65536 else None


def _coerce_level(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    level = raw.strip().upper()
    return level if level in VALID_LOG_LEVELS else None


def _apply(config: TrackerConfig, values: Mapping[str, Any]) -> TrackerConfig:
    changes: dict[str, Any] = {}
    data_file = values.get("data_file")
    if isinstance(data_file, str) and data_file.strip():
        changes["data_file"] = Path(data_file).expanduser()
    host = values.get("host")
    if isinstance(host, str) and host.strip():
        changes["host"] = host.strip()
    if values.get("port") is not None:
        port = _coerce_port(values.get("port"))
        if port is not None:
            changes["port"] = port
    level = _coerce_level(values.get("log_level"))
    if level is not None:
        changes["log_level"] = level
    return replace(config, **changes)


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> tuple[TrackerConfig, str | None]:
    """Build the effective configuration.

    Args:
        config_path: Explicit YAML config file. Defaults to ``task_tracker.yaml``
            in the working directory; a missing file is not an error.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        A tuple of `(config, error_message)`. An unreadable config file is
        reported through `error_message` and otherwise ignored.
    """
    env = os.environ if environ is None else environ
    config = TrackerConfig()

    path = config_path or Path(CONFIG_FILE)
    data, err = _load_data_with_error(path, {})
    if not err:
        config = _apply(config, data)

    env_values = {
        "data_file": env.get(ENV_DATA_FILE),
        "host": env.get(ENV_HOST),
        "port": env.get(ENV_PORT),
        "log_level": env.get(ENV_LOG_LEVEL),
    }
    config = _apply(config, env_values)
    return config, err
