from __future__ import annotations

import logging
import socket
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

import requests

from cpas.api.decoder import decode
from cpas.config.connection import ConfigurationHolder
from cpas.config.settings import DispatchSettings
from cpas.dispatch.outcome import CallOutcome
from cpas.dispatch.pool import WorkerPool
from cpas.errors import CallCancelledError, CpasError, DecodeError, FetchTimeoutError, NetworkError

LOGGER = logging.getLogger("cpas.dispatch")

CompletionHandler = Callable[[CallOutcome], Any]

_CHUNK_SIZE = 8192


@dataclass
class CallRequest:
    url: str
    path: str
    shape: type
    on_complete: Optional[CompletionHandler] = None


class Dispatcher:
    """Runs CPAS calls on a bounded worker pool.

    The connection is snapshotted when a call is submitted, so a later
    ``reconfigure`` only affects calls submitted after it. Each call makes a
    single GET attempt bounded by ``settings.fetch_timeout``, and its
    completion handler runs exactly once with a :class:`CallOutcome`: on a
    pool thread once the call ran, or on the cancelling thread with a
    :class:`CallCancelledError` if the call was cancelled while queued.
    """

    def __init__(
        self,
        holder: ConfigurationHolder,
        settings: Optional[DispatchSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._holder = holder
        self._settings = settings or DispatchSettings()
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._pool = WorkerPool(
            max_workers=self._settings.max_workers,
            idle_timeout=self._settings.idle_timeout,
        )

    @property
    def settings(self) -> DispatchSettings:
        return self._settings

    @property
    def pool(self) -> WorkerPool:
        return self._pool

    def submit(
        self,
        path: str,
        shape: Type[Any],
        on_complete: Optional[CompletionHandler] = None,
    ) -> "Future[CallOutcome]":
        config = self._holder.snapshot()
        request = CallRequest(url=config.url_for(path), path=path, shape=shape, on_complete=on_complete)
        future = self._pool.submit(self._run_call, request)
        future.add_done_callback(lambda done: self._notify_cancelled(request, done))
        return future

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        self._pool.shutdown(wait=wait, cancel_pending=cancel_pending)
        if self._owns_session and wait:
            self._session.close()

    def _run_call(self, request: CallRequest) -> CallOutcome:
        start = time.perf_counter()
        outcome = self._execute(request)
        elapsed = time.perf_counter() - start
        if outcome.ok:
            LOGGER.info(f"[dispatch] call path={request.path} ok elapsed={elapsed:.2f}s")
        else:
            LOGGER.warning(f"[dispatch] call path={request.path} failed elapsed={elapsed:.2f}s: {outcome.error_message}")
        self._deliver(request, outcome)
        return outcome

    def _notify_cancelled(self, request: CallRequest, future: "Future[CallOutcome]") -> None:
        # A cancelled future never reached a worker, so the handler has not run yet.
        if not future.cancelled():
            return
        LOGGER.warning(f"[dispatch] call path={request.path} cancelled before it started")
        self._deliver(request, CallOutcome.failure(CallCancelledError("call cancelled before it started")))

    def _deliver(self, request: CallRequest, outcome: CallOutcome) -> None:
        if request.on_complete is None:
            return
        try:
            request.on_complete(outcome)
        except Exception:
            LOGGER.exception(f"[dispatch] completion handler raised for path={request.path}")

    def _execute(self, request: CallRequest) -> CallOutcome:
        try:
            raw_text = self._fetch(request.url)
            return CallOutcome.success(decode(raw_text, request.shape))
        except CpasError as err:
            return CallOutcome.failure(err)
        except Exception as err:
            return CallOutcome.failure(NetworkError(f"{type(err).__name__}: {err}"))

    def _fetch(self, url: str) -> str:
        timeout = self._settings.fetch_timeout
        deadline = time.monotonic() + timeout
        watchdog = _Watchdog(timeout)
        watchdog.start()
        try:
            try:
                response = self._session.get(url, timeout=(timeout, timeout), stream=True)
            except requests.Timeout as err:
                raise FetchTimeoutError(f"Request timed out after {timeout}s") from err
            except (requests.RequestException, OSError) as err:
                if watchdog.fired or time.monotonic() > deadline:
                    raise FetchTimeoutError(f"Request timed out after {timeout}s") from err
                raise NetworkError(f"{type(err).__name__}: {err}") from err

            watchdog.attach(response)
            try:
                if watchdog.fired:
                    raise FetchTimeoutError(f"Response not received within {timeout}s")
                try:
                    response.raise_for_status()
                except requests.HTTPError as err:
                    raise NetworkError(f"HTTP {response.status_code}: {err}") from err

                chunks = []
                try:
                    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                        if watchdog.fired or time.monotonic() > deadline:
                            raise FetchTimeoutError(f"Response not received within {timeout}s")
                        if chunk:
                            chunks.append(chunk)
                except FetchTimeoutError:
                    raise
                except (requests.RequestException, OSError) as err:
                    # requests reports a body read timeout as a ConnectionError.
                    if isinstance(err, requests.Timeout) or watchdog.fired or time.monotonic() > deadline:
                        raise FetchTimeoutError(f"Request timed out after {timeout}s") from err
                    raise NetworkError(f"{type(err).__name__}: {err}") from err
                except Exception as err:
                    if watchdog.fired:
                        raise FetchTimeoutError(f"Response not received within {timeout}s") from err
                    raise
                if watchdog.fired or time.monotonic() > deadline:
                    raise FetchTimeoutError(f"Response not received within {timeout}s")
            finally:
                response.close()
        finally:
            watchdog.cancel()

        try:
            return b"".join(chunks).decode("utf-8")
        except UnicodeDecodeError as err:
            raise DecodeError(f"Response body is not UTF-8: {err}") from err


class _Watchdog:
    """Cuts the connection of a call that is still reading at its deadline.

    Socket timeouts bound each read, not the whole response, so a server that
    trickles bytes could otherwise hold a worker indefinitely. Shutting the
    socket down wakes the blocked read immediately.
    """

    def __init__(self, timeout: float) -> None:
        self._lock = threading.Lock()
        self._response: Any = None
        self._fired = False
        self._timer = threading.Timer(timeout, self._fire)
        self._timer.daemon = True

    @property
    def fired(self) -> bool:
        with self._lock:
            return self._fired

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._timer.cancel()

    def attach(self, response: Any) -> None:
        with self._lock:
            self._response = response
            fired = self._fired
        if fired:
            _abort_connection(response)

    def _fire(self) -> None:
        with self._lock:
            self._fired = True
            response = self._response
        if response is not None:
            _abort_connection(response)


def _abort_connection(response: Any) -> None:
    connection = getattr(getattr(response, "raw", None), "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Already closed by the reading thread.
        LOGGER.debug("[dispatch] connection already closed at deadline")
