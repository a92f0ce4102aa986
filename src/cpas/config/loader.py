"""Configuration loading and resolver helpers.

"""

from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from cpas.config.connection import ConnectionConfig, build_connection
from cpas.config.defaults import DEFAULT_CONFIG
from cpas.config.settings import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_IDLE_TIMEOUT,
    DEFAULT_MAX_WORKERS,
    DispatchSettings,
)
from cpas.utils import deep_merge, env_float, env_int, env_str, load_dotenv_files

_CONNECTION_ENV_KEYS: Dict[str, str] = {
    "base_url": "CPAS_BASE_URL",
    "api_key": "CPAS_API_KEY",
    "host": "CPAS_HOST",
    "port": "CPAS_PORT",
}
_FORBIDDEN_CONNECTION_KEYS: set[str] = {"api_key_env"}
LOGGER = logging.getLogger("cpas.config")


def load_config(config_path: str | Path) -> Tuple[Dict[str, Any], Path]:
    """Load config.

    Args:
        config_path (str | Path): Path to a YAML configuration file.

    Returns:
        Tuple[Dict[str, Any], Path]: The normalized configuration merged over
        ``DEFAULT_CONFIG`` with environment overrides applied, and the resolved path.

    Raises:
        FileNotFoundError: Raised when the file does not exist.
        ValueError: Raised when the file is not a YAML mapping.

    Side Effects / I/O:
        - Reads the config file and an optional ``.env`` next to it.
        - Reads ``CPAS_*`` environment variables.

    Examples:
        >>> from cpas.config.loader import load_config
        >>> cfg, path = load_config("cpas.yaml")

    """
    path = Path(config_path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}

    if not isinstance(loaded, dict):
        raise ValueError("Config must be a YAML object.")
    _validate_connection_keys(loaded)

    load_dotenv_files(path.parent)
    cfg = deep_merge(deepcopy(DEFAULT_CONFIG), loaded)
    _apply_env_overrides(cfg)
    _normalize_config(cfg)
    return cfg, path


def resolve_connection(cfg: Dict[str, Any]) -> Optional[ConnectionConfig]:
    """Resolve connection from configuration.

    Returns ``None`` when no connection field is set so that a client can be
    created first and configured later; a partially filled section raises
    :class:`cpas.errors.ConfigurationError`.

    """
    conn_cfg = cfg.get("connection") or {}
    values = {key: str(conn_cfg.get(key) or "").strip() for key in _CONNECTION_ENV_KEYS}
    if not any(values.values()):
        return None
    return build_connection(**values)


def resolve_dispatch_settings(cfg: Dict[str, Any]) -> DispatchSettings:
    dispatch_cfg = cfg.get("dispatch") or {}
    return DispatchSettings(
        max_workers=dispatch_cfg.get("max_workers", DEFAULT_MAX_WORKERS),
        idle_timeout=dispatch_cfg.get("idle_timeout", DEFAULT_IDLE_TIMEOUT),
        fetch_timeout=dispatch_cfg.get("fetch_timeout", DEFAULT_FETCH_TIMEOUT),
    )


def _validate_connection_keys(loaded: Dict[str, Any]) -> None:
    conn_cfg = loaded.get("connection")
    if conn_cfg is None:
        return
    if not isinstance(conn_cfg, dict):
        raise ValueError("`connection` must be a YAML object.")
    forbidden_keys = [key for key in _FORBIDDEN_CONNECTION_KEYS if key in conn_cfg]
    if forbidden_keys:
        joined = ", ".join(f"`{key}`" for key in sorted(forbidden_keys))
        raise ValueError(f"Unsupported connection field(s): {joined}. Use CPAS_API_KEY instead.")


def _apply_env_overrides(cfg: Dict[str, Any]) -> None:
    conn_cfg = cfg.setdefault("connection", {})
    for key, env_name in _CONNECTION_ENV_KEYS.items():
        value = env_str(env_name)
        if value:
            conn_cfg[key] = value

    dispatch_cfg = cfg.setdefault("dispatch", {})
    dispatch_cfg["max_workers"] = env_int("CPAS_MAX_WORKERS", _as_int(dispatch_cfg.get("max_workers"), DEFAULT_MAX_WORKERS))
    dispatch_cfg["idle_timeout"] = env_float(
        "CPAS_IDLE_TIMEOUT", _as_float(dispatch_cfg.get("idle_timeout"), DEFAULT_IDLE_TIMEOUT)
    )
    dispatch_cfg["fetch_timeout"] = env_float(
        "CPAS_FETCH_TIMEOUT", _as_float(dispatch_cfg.get("fetch_timeout"), DEFAULT_FETCH_TIMEOUT)
    )

    logging_cfg = cfg.setdefault("logging", {})
    level = env_str("CPAS_LOG_LEVEL")
    if level:
        logging_cfg["level"] = level


def _normalize_config(cfg: Dict[str, Any]) -> None:
    conn_cfg = cfg["connection"]
    for key in _CONNECTION_ENV_KEYS:
        raw = conn_cfg.get(key)
        conn_cfg[key] = "" if raw is None else str(raw).strip()

    dispatch_cfg = cfg["dispatch"]
    if dispatch_cfg["max_workers"] < 1:
        LOGGER.warning(f"[config] max_workers={dispatch_cfg['max_workers']} is invalid; using {DEFAULT_MAX_WORKERS}")
        dispatch_cfg["max_workers"] = DEFAULT_MAX_WORKERS
    if dispatch_cfg["idle_timeout"] <= 0:
        dispatch_cfg["idle_timeout"] = DEFAULT_IDLE_TIMEOUT
    if dispatch_cfg["fetch_timeout"] <= 0:
        dispatch_cfg["fetch_timeout"] = DEFAULT_FETCH_TIMEOUT

    logging_cfg = cfg["logging"]
    logging_cfg["level"] = str(logging_cfg.get("level") or "INFO").strip().upper()
    logging_cfg["dir"] = str(logging_cfg.get("dir") or "").strip()


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
