from __future__ import annotations

import json
import uuid
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from cpas.api.models import (
    BanHistoryResult,
    BanInfoResult,
    BanRecord,
    BanSuccessResult,
    DedicatedSupporterInfo,
    GroupInfo,
    InfoResult,
)
from cpas.errors import DecodeError

T = TypeVar("T")
_MISSING = object()


def decode(raw_text: str, shape: Type[T]) -> T:
    """Decode a raw JSON payload into ``shape``.

    Args:
        raw_text (str): Response body as received from the service.
        shape (Type[T]): One of the result classes in :mod:`cpas.api.models`.

    Returns:
        T: A fully populated instance of ``shape``. Unknown payload fields are ignored.

    Raises:
        DecodeError: When the text is not JSON, a required field is missing or
            has the wrong type, or ``shape`` is not a known result shape.

    """
    parser = _PARSERS.get(shape)
    if parser is None:
        raise DecodeError(f"Unsupported response shape: {getattr(shape, '__name__', shape)!r}")
    try:
        payload = json.loads(raw_text)
    except (TypeError, ValueError) as err:
        raise DecodeError(f"Response is not valid JSON: {err}") from err
    return parser(_as_object(payload, shape.__name__))


def _as_object(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"{where}: expected a JSON object, got {_type_name(value)}")
    return value


def _field(payload: Mapping[str, Any], key: str, where: str, *aliases: str) -> Any:
    for name in (key, *aliases):
        value = payload.get(name, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    raise DecodeError(f"{where}: missing required field `{key}`")


def _str(payload: Mapping[str, Any], key: str, where: str, *aliases: str) -> str:
    value = _field(payload, key, where, *aliases)
    if not isinstance(value, str):
        raise DecodeError(f"{where}.{key}: expected string, got {_type_name(value)}")
    return value


def _int(payload: Mapping[str, Any], key: str, where: str, *aliases: str) -> int:
    value = _field(payload, key, where, *aliases)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{where}.{key}: expected integer, got {_type_name(value)}")
    return value


def _bool(payload: Mapping[str, Any], key: str, where: str) -> bool:
    value = _field(payload, key, where)
    if not isinstance(value, bool):
        raise DecodeError(f"{where}.{key}: expected boolean, got {_type_name(value)}")
    return value


def _optional_str(payload: Mapping[str, Any], key: str, where: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{where}.{key}: expected string, got {_type_name(value)}")
    return value


def _list(payload: Mapping[str, Any], key: str, where: str) -> list:
    value = _field(payload, key, where)
    if not isinstance(value, list):
        raise DecodeError(f"{where}.{key}: expected array, got {_type_name(value)}")
    return value


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _parse_group(payload: Any, where: str) -> GroupInfo:
    group = _as_object(payload, where)
    return GroupInfo(name=_str(group, "name", where), rank=_int(group, "rank", where))


def _parse_ds_info(payload: Any, where: str) -> DedicatedSupporterInfo:
    ds = _as_object(payload, where)
    return DedicatedSupporterInfo(
        is_dedicated_supporter=_bool(ds, "ds", where),
        display_chat_tag=_bool(ds, "chatTag", where),
        display_chat_ads=_bool(ds, "chatAds", where),
        display_motd_ads=_bool(ds, "motdAds", where),
        display_in_spotlight=_bool(ds, "spotlight", where),
        name_color=_str(ds, "nameColor", where),
        join_message=_str(ds, "joinMessage", where),
    )


def _parse_info(payload: Mapping[str, Any]) -> InfoResult:
    where = "InfoResult"
    raw_game_id = _str(payload, "gameid", where, "gameId")
    try:
        game_id = uuid.UUID(raw_game_id)
    except ValueError as err:
        raise DecodeError(f"{where}.gameid: not a UUID: {raw_game_id!r}") from err

    groups = tuple(
        _parse_group(item, f"{where}.groups[{index}]") for index, item in enumerate(_list(payload, "groups", where))
    )
    return InfoResult(
        game_id=game_id,
        user_id=_int(payload, "userid", where, "userId"),
        name=_str(payload, "name", where),
        primary_group=GroupInfo(
            name=_str(payload, "primaryGroup", where),
            rank=_int(payload, "primaryRank", where),
        ),
        groups=groups,
        division_name=_str(payload, "divisionName", where),
        ds_info=_parse_ds_info(_field(payload, "dsInfo", where), f"{where}.dsInfo"),
        verification=_bool(payload, "verification", where),
        verification_expired=_bool(payload, "verificationExpired", where),
    )


def _parse_ban_success(payload: Mapping[str, Any]) -> BanSuccessResult:
    where = "BanSuccessResult"
    success = payload.get("success")
    if success is not None and not isinstance(success, bool):
        raise DecodeError(f"{where}.success: expected boolean, got {_type_name(success)}")
    error = _optional_str(payload, "error", where)
    if success is None and error is None:
        raise DecodeError(f"{where}: missing required field `success`")
    return BanSuccessResult(
        success=success,
        error=error,
        internal_error=_optional_str(payload, "internalError", where),
    )


def _parse_ban_info(payload: Mapping[str, Any]) -> BanInfoResult:
    where = "BanInfoResult"
    return BanInfoResult(duration=_int(payload, "duration", where), reason=_str(payload, "reason", where))


def _parse_ban_record(payload: Any, where: str) -> BanRecord:
    record = _as_object(payload, where)
    return BanRecord(
        date=_int(record, "date", where),
        duration=_int(record, "duration", where),
        length=_int(record, "length", where),
        reason=_str(record, "reason", where),
    )


def _parse_ban_history(payload: Mapping[str, Any]) -> BanHistoryResult:
    where = "BanHistoryResult"
    bans = _list(payload, "bans", where)
    return BanHistoryResult(
        bans=tuple(_parse_ban_record(item, f"{where}.bans[{index}]") for index, item in enumerate(bans))
    )


_PARSERS: Dict[type, Callable[[Mapping[str, Any]], Any]] = {
    InfoResult: _parse_info,
    BanSuccessResult: _parse_ban_success,
    BanInfoResult: _parse_ban_info,
    BanHistoryResult: _parse_ban_history,
}
