"""Call-path construction for the CPAS HTTP API.

Every free-text or identifier segment is passed through
:func:`base64_encode_safe` so that it can never introduce a path separator.
"""

from __future__ import annotations

import base64
from typing import Iterable, Optional


def base64_encode_safe(value: str) -> str:
    """Base64 encode ``value`` with ``/`` and ``+`` swapped for ``_`` and ``-``.

    Args:
        value (str): Text to encode; its UTF-8 bytes are encoded.

    Returns:
        str: The encoded text, padding kept.

    Examples:
        >>> from cpas.api.encoder import base64_encode_safe
        >>> base64_encode_safe("??>")
        'Pz8-'

    """
    encoded = base64.b64encode(value.encode("utf-8")).decode("ascii")
    return encoded.replace("/", "_").replace("+", "-")


def encode_info(game_id: str, ip: Optional[str] = "", verbose: bool = False) -> str:
    return "/".join(
        [
            "info",
            base64_encode_safe(game_id),
            ip or "",
            "verbose" if verbose else "",
        ]
    )


def encode_ban(
    game_id: str,
    handle: str,
    banner_id: str,
    admin_ids: Iterable[str],
    minutes: int = 0,
    reason: Optional[str] = "",
) -> str:
    admins = ",".join(base64_encode_safe(admin_id) for admin_id in admin_ids)
    return "/".join(
        [
            "ban",
            base64_encode_safe(game_id),
            base64_encode_safe(handle),
            base64_encode_safe(banner_id),
            admins,
            str(int(minutes)),
            base64_encode_safe(reason) if reason else "",
        ]
    )


def encode_ban_info(game_id: str) -> str:
    return f"banInfo/{base64_encode_safe(game_id)}"


def encode_ban_history(game_id: str, count: int) -> str:
    # The service validates count; it is sent as given.
    return f"banHistory/{base64_encode_safe(game_id)}/{int(count)}"
