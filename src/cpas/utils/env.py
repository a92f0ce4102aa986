"""Environment variable parsing and dotenv loading helpers.

"""

from __future__ import annotations

import os
from pathlib import Path

_DOTENV_PREFIX = "CPAS_"


def env_str(name: str, default: str = "") -> str:
    """Env str.

    Args:
        name (str): Environment variable to read.
        default (str): Value returned when the variable is unset or blank.

    Returns:
        str: The stripped value, or ``default``.

    Side Effects / I/O:
        - Reads the process environment.

    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def load_dotenv_files(project_root: Path) -> None:
    """Load ``CPAS_*`` keys from ``project_root/.env``.

    Variables already present in the process environment are left untouched
    and keys without the ``CPAS_`` prefix are skipped.

    Args:
        project_root (Path): Directory that may contain a ``.env`` file.

    Returns:
        None: No value is returned.

    Side Effects / I/O:
        - Reads a local file and mutates ``os.environ``.

    """
    _load_dotenv_file(project_root / ".env")


def _is_allowed_dotenv_key(key: str) -> bool:
    return key.upper().startswith(_DOTENV_PREFIX)


def _load_dotenv_file(path: Path) -> None:
    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("\"'")
        if key and _is_allowed_dotenv_key(key) and key not in os.environ:
            os.environ[key] = value
