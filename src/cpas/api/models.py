"""Typed result shapes returned by the CPAS service.

"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple


@dataclass(frozen=True)
class GroupInfo:
    name: str
    rank: int


@dataclass(frozen=True)
class DedicatedSupporterInfo:
    is_dedicated_supporter: bool
    display_chat_tag: bool
    display_chat_ads: bool
    display_motd_ads: bool
    display_in_spotlight: bool
    name_color: str
    join_message: str


@dataclass(frozen=True)
class InfoResult:
    """Identity, group and verification details for one player."""

    game_id: uuid.UUID
    user_id: int
    name: str
    primary_group: GroupInfo
    groups: Tuple[GroupInfo, ...]
    division_name: str
    ds_info: DedicatedSupporterInfo
    verification: bool
    verification_expired: bool


@dataclass(frozen=True)
class BanSuccessResult:
    """Answer to a ban request.

    The service reports its own failures as ``{"error": ..., "internalError": ...}``;
    those are returned here as content, with ``success`` left as ``None``.
    """

    success: Optional[bool] = None
    error: Optional[str] = None
    internal_error: Optional[str] = None

    @property
    def is_service_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class BanInfoResult:
    duration: int
    reason: str

    @property
    def is_banned(self) -> bool:
        return self.duration != 0

    @property
    def is_permanent(self) -> bool:
        return self.duration == -1


@dataclass(frozen=True)
class BanRecord:
    date: int
    duration: int
    length: int
    reason: str

    @property
    def banned_at(self) -> datetime:
        return datetime.fromtimestamp(self.date, tz=timezone.utc)


@dataclass(frozen=True)
class BanHistoryResult:
    bans: Tuple[BanRecord, ...]
