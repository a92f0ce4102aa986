"""Public package entrypoints for the CPAS client.

This module defines the stable, top-level APIs intended for external callers.
"""

from __future__ import annotations

from cpas.api.models import (
    BanHistoryResult,
    BanInfoResult,
    BanRecord,
    BanSuccessResult,
    DedicatedSupporterInfo,
    GroupInfo,
    InfoResult,
)
from cpas.client import CpasClient
from cpas.config import ConnectionConfig, DispatchSettings
from cpas.dispatch import CallOutcome
from cpas.errors import (
    CallCancelledError,
    ConfigurationError,
    CpasError,
    DecodeError,
    FetchTimeoutError,
    NetworkError,
)

__all__ = [
    "CpasClient",
    "ConnectionConfig",
    "DispatchSettings",
    "CallOutcome",
    "CpasError",
    "ConfigurationError",
    "NetworkError",
    "FetchTimeoutError",
    "DecodeError",
    "CallCancelledError",
    "InfoResult",
    "GroupInfo",
    "DedicatedSupporterInfo",
    "BanSuccessResult",
    "BanInfoResult",
    "BanRecord",
    "BanHistoryResult",
]
__version__ = "0.1.0"
