from __future__ import annotations

import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Iterable, Optional

import requests

from cpas.api.encoder import encode_ban, encode_ban_history, encode_ban_info, encode_info
from cpas.api.models import BanHistoryResult, BanInfoResult, BanSuccessResult, InfoResult
from cpas.config.connection import ConfigurationHolder, ConnectionConfig
from cpas.config.loader import load_config, resolve_connection, resolve_dispatch_settings
from cpas.config.settings import DispatchSettings
from cpas.dispatch.dispatcher import CompletionHandler, Dispatcher
from cpas.dispatch.outcome import CallOutcome

LOGGER = logging.getLogger("cpas.client")


class CpasClient:
    """Client for the CPAS administrative service.

    Every call returns a :class:`concurrent.futures.Future` that resolves to a
    :class:`CallOutcome` once the optional ``callback`` has run. Callbacks are
    invoked on a worker thread.

    Usage:
        with CpasClient(ConnectionConfig("https://cpas.example", "key", "10.0.0.1", "27015")) as client:
            outcome = client.fetch_ban_info("76561198000000000").result()
    """

    def __init__(
        self,
        connection: Optional[ConnectionConfig] = None,
        *,
        settings: Optional[DispatchSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._holder = ConfigurationHolder(connection)
        self._dispatcher = Dispatcher(self._holder, settings=settings, session=session)

    @classmethod
    def from_config(cls, config_path: str | Path, session: Optional[requests.Session] = None) -> "CpasClient":
        cfg, path = load_config(config_path)
        LOGGER.debug(f"[client] loaded config from {path}")
        return cls(
            resolve_connection(cfg),
            settings=resolve_dispatch_settings(cfg),
            session=session,
        )

    @property
    def connection(self) -> ConnectionConfig:
        return self._holder.snapshot()

    @property
    def settings(self) -> DispatchSettings:
        return self._dispatcher.settings

    def reconfigure(self, base_url: str, api_key: str, host: str, port: Any) -> None:
        config = self._holder.reconfigure(base_url, api_key, host, port)
        LOGGER.info(f"[client] reconfigured base_url={config.base_url} host={config.host} port={config.port}")

    def fetch_info(
        self,
        game_id: str,
        player_ip: Optional[str] = "",
        verbose: bool = False,
        callback: Optional[CompletionHandler] = None,
    ) -> "Future[CallOutcome[InfoResult]]":
        return self._dispatcher.submit(encode_info(game_id, player_ip, verbose), InfoResult, callback)

    def ban_user(
        self,
        game_id: str,
        handle: str,
        banner_id: str,
        admin_ids: Iterable[str],
        minutes: int = 0,
        reason: Optional[str] = "",
        callback: Optional[CompletionHandler] = None,
    ) -> "Future[CallOutcome[BanSuccessResult]]":
        path = encode_ban(game_id, handle, banner_id, admin_ids, minutes, reason)
        return self._dispatcher.submit(path, BanSuccessResult, callback)

    def fetch_ban_info(
        self,
        game_id: str,
        callback: Optional[CompletionHandler] = None,
    ) -> "Future[CallOutcome[BanInfoResult]]":
        return self._dispatcher.submit(encode_ban_info(game_id), BanInfoResult, callback)

    def fetch_ban_history(
        self,
        game_id: str,
        count: int,
        callback: Optional[CompletionHandler] = None,
    ) -> "Future[CallOutcome[BanHistoryResult]]":
        return self._dispatcher.submit(encode_ban_history(game_id, count), BanHistoryResult, callback)

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        self._dispatcher.shutdown(wait=wait, cancel_pending=cancel_pending)

    def __enter__(self) -> "CpasClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
