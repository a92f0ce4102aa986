from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Optional

from cpas.errors import ConfigurationError


@dataclass(frozen=True)
class ConnectionConfig:
    base_url: str
    api_key: str
    host: str
    port: str

    def url_for(self, path: str) -> str:
        return "/".join([self.base_url.rstrip("/"), self.api_key, self.host, self.port, path])


def _require(name: str, value: Any) -> str:
    if value is None:
        raise ConfigurationError(f"Connection parameter `{name}` is required.")
    text = value if isinstance(value, str) else str(value)
    if not text.strip():
        raise ConfigurationError(f"Connection parameter `{name}` must not be empty.")
    return text


def build_connection(base_url: Any, api_key: Any, host: Any, port: Any) -> ConnectionConfig:
    return ConnectionConfig(
        base_url=_require("base_url", base_url),
        api_key=_require("api_key", api_key),
        host=_require("host", host),
        port=_require("port", port),
    )


class ConfigurationHolder:
    """Lock-guarded owner of the current :class:`ConnectionConfig`.

    Readers never observe a half-updated configuration: ``reconfigure`` swaps a
    single immutable value and ``snapshot`` returns that value, both under the
    same lock. Nothing but the assignment and the read happens while the lock
    is held.
    """

    def __init__(self, initial: Optional[ConnectionConfig] = None) -> None:
        self._lock = threading.Lock()
        self._config = initial

    @property
    def configured(self) -> bool:
        with self._lock:
            return self._config is not None

    def reconfigure(self, base_url: Any, api_key: Any, host: Any, port: Any) -> ConnectionConfig:
        config = build_connection(base_url, api_key, host, port)
        with self._lock:
            self._config = config
        return config

    def snapshot(self) -> ConnectionConfig:
        with self._lock:
            config = self._config
        if config is None:
            raise ConfigurationError("CPAS connection is not configured; call reconfigure() first.")
        return config
