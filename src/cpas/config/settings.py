from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_WORKERS = 5
DEFAULT_IDLE_TIMEOUT = 60.0
DEFAULT_FETCH_TIMEOUT = 5.0


@dataclass(frozen=True)
class DispatchSettings:
    """Sizing and timing of the dispatch worker pool.

    Args:
        max_workers (int): Upper bound on concurrently running calls.
        idle_timeout (float): Seconds an idle worker thread waits for work before exiting.
        fetch_timeout (float): Hard deadline in seconds for one HTTP fetch, body included.

    Raises:
        ValueError: When any value is not strictly positive.

    """

    max_workers: int = DEFAULT_MAX_WORKERS
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1.")
        if self.idle_timeout <= 0:
            raise ValueError("idle_timeout must be positive.")
        if self.fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive.")
