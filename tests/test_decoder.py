from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone

import pytest

from _fakes import INFO_BODY
from cpas.api.decoder import decode
from cpas.api.models import (
    BanHistoryResult,
    BanInfoResult,
    BanRecord,
    BanSuccessResult,
    GroupInfo,
    InfoResult,
)
from cpas.errors import DecodeError


def test_decode_ban_info() -> None:
    result = decode('{"duration":0,"reason":"Banned"}', BanInfoResult)
    assert result == BanInfoResult(duration=0, reason="Banned")
    assert not result.is_banned


def test_decode_ban_info_missing_reason_fails() -> None:
    with pytest.raises(DecodeError, match="reason"):
        decode('{"duration":0}', BanInfoResult)


def test_decode_ban_info_rejects_type_mismatch() -> None:
    with pytest.raises(DecodeError, match="duration"):
        decode('{"duration":"forever","reason":"x"}', BanInfoResult)
    with pytest.raises(DecodeError, match="duration"):
        decode('{"duration":true,"reason":"x"}', BanInfoResult)


def test_decode_ban_info_permanent() -> None:
    result = decode('{"duration":-1,"reason":"cheating","extra":1}', BanInfoResult)
    assert result.is_banned
    assert result.is_permanent


def test_decode_info() -> None:
    result = decode(INFO_BODY, InfoResult)

    assert result.game_id == uuid.UUID("0f8fad5b-d9cb-469f-a165-70867728950e")
    assert result.user_id == 42
    assert result.name == "Shepard"
    assert result.primary_group == GroupInfo(name="Members", rank=3)
    assert result.groups == (GroupInfo("Members", 3), GroupInfo("Admins", 9))
    assert result.division_name == "Seventh"
    assert result.ds_info.is_dedicated_supporter
    assert result.ds_info.display_in_spotlight
    assert not result.ds_info.display_chat_ads
    assert result.ds_info.name_color == "#ff0000"
    assert result.verification
    assert not result.verification_expired


def test_decode_info_accepts_camel_case_ids_and_ignores_division() -> None:
    payload = json.loads(INFO_BODY)
    payload["gameId"] = payload.pop("gameid")
    payload["userId"] = payload.pop("userid")
    payload.pop("division")

    result = decode(json.dumps(payload), InfoResult)
    assert result.user_id == 42


def test_decode_info_rejects_bad_uuid() -> None:
    payload = json.loads(INFO_BODY)
    payload["gameid"] = "not-a-uuid"
    with pytest.raises(DecodeError, match="UUID"):
        decode(json.dumps(payload), InfoResult)


def test_decode_info_reports_nested_field_path() -> None:
    payload = json.loads(INFO_BODY)
    del payload["dsInfo"]["joinMessage"]
    with pytest.raises(DecodeError, match=r"dsInfo.*joinMessage"):
        decode(json.dumps(payload), InfoResult)

    payload = json.loads(INFO_BODY)
    payload["groups"][1]["rank"] = "high"
    with pytest.raises(DecodeError, match=r"groups\[1\]"):
        decode(json.dumps(payload), InfoResult)


def test_decode_ban_history() -> None:
    body = '{"bans": [{"date": 1500000000, "duration": 60, "length": 3600, "reason": "spam"}]}'
    result = decode(body, BanHistoryResult)

    assert result.bans == (BanRecord(date=1500000000, duration=60, length=3600, reason="spam"),)
    assert result.bans[0].banned_at == datetime(2017, 7, 14, 2, 40, tzinfo=timezone.utc)


def test_decode_ban_history_empty() -> None:
    assert decode('{"bans": []}', BanHistoryResult) == BanHistoryResult(bans=())


def test_decode_ban_success() -> None:
    assert decode('{"success": true}', BanSuccessResult) == BanSuccessResult(success=True)


def test_decode_ban_success_passes_service_error_through() -> None:
    result = decode('{"error": "Unknown server", "internalError": "no row"}', BanSuccessResult)
    assert result.success is None
    assert result.is_service_error
    assert result.internal_error == "no row"


def test_decode_ban_success_requires_success_or_error() -> None:
    with pytest.raises(DecodeError, match="success"):
        decode("{}", BanSuccessResult)


@pytest.mark.parametrize("raw", ["", "not json", "[1, 2]", "null"])
def test_decode_rejects_non_object_payloads(raw: str) -> None:
    with pytest.raises(DecodeError):
        decode(raw, BanInfoResult)


def test_decode_rejects_unknown_shape() -> None:
    with pytest.raises(DecodeError, match="Unsupported"):
        decode("{}", dict)
