from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path
from typing import Dict, Optional


_LOGGER_FILES: Dict[str, str] = {
    "cpas.dispatch": "dispatch.log",
    "cpas.client": "client.log",
}
_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(logs_dir: Optional[Path] = None, level: int = logging.INFO) -> None:
    root = logging.getLogger("cpas")
    configured_dir = getattr(root, "_cpas_logs_dir", None)
    configured_level = getattr(root, "_cpas_logs_level", None)
    target_dir = str(logs_dir) if logs_dir is not None else ""
    if configured_level is not None and configured_dir == target_dir and configured_level == level:
        return

    _close_handlers(root)
    root.setLevel(level)
    root.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(console_handler)

    for logger_name in _LOGGER_FILES:
        _close_handlers(logging.getLogger(logger_name))

    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)
        run_handler = logging.FileHandler(logs_dir / "run.log", encoding="utf-8")
        run_handler.setLevel(level)
        run_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        root.addHandler(run_handler)

        for logger_name, filename in _LOGGER_FILES.items():
            logger = logging.getLogger(logger_name)
            logger.setLevel(level)
            logger.propagate = True
            file_handler = logging.FileHandler(logs_dir / filename, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            logger.addHandler(file_handler)

    root._cpas_logs_dir = target_dir  # type: ignore[attr-defined]
    root._cpas_logs_level = level  # type: ignore[attr-defined]


def parse_level(raw: object, default: int = logging.INFO) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    name = str(raw or "").strip().upper()
    value = logging.getLevelName(name) if name else None
    return value if isinstance(value, int) else default


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        with suppress(Exception):
            handler.close()
