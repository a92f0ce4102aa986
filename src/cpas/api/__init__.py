from cpas.api.decoder import decode
from cpas.api.encoder import (
    base64_encode_safe,
    encode_ban,
    encode_ban_history,
    encode_ban_info,
    encode_info,
)
from cpas.api.models import (
    BanHistoryResult,
    BanInfoResult,
    BanRecord,
    BanSuccessResult,
    DedicatedSupporterInfo,
    GroupInfo,
    InfoResult,
)

__all__ = [
    "decode",
    "base64_encode_safe",
    "encode_ban",
    "encode_ban_history",
    "encode_ban_info",
    "encode_info",
    "BanHistoryResult",
    "BanInfoResult",
    "BanRecord",
    "BanSuccessResult",
    "DedicatedSupporterInfo",
    "GroupInfo",
    "InfoResult",
]
