from __future__ import annotations

import os
from pathlib import Path

import pytest

from cpas.config import DispatchSettings, load_config, resolve_connection, resolve_dispatch_settings
from cpas.errors import ConfigurationError

_ENV_KEYS = [
    "CPAS_BASE_URL",
    "CPAS_API_KEY",
    "CPAS_HOST",
    "CPAS_PORT",
    "CPAS_MAX_WORKERS",
    "CPAS_IDLE_TIMEOUT",
    "CPAS_FETCH_TIMEOUT",
    "CPAS_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "cpas.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_applies_defaults(tmp_path: Path) -> None:
    cfg, path = load_config(_write(tmp_path, "{}"))

    assert path == (tmp_path / "cpas.yaml").resolve()
    assert resolve_connection(cfg) is None
    assert resolve_dispatch_settings(cfg) == DispatchSettings(max_workers=5, idle_timeout=60.0, fetch_timeout=5.0)
    assert cfg["logging"] == {"level": "INFO", "dir": ""}


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(
        tmp_path,
        "connection:\n  base_url: https://file.example\n  api_key: file-key\n  host: h\n  port: 1\n"
        "dispatch:\n  max_workers: 2\n",
    )
    monkeypatch.setenv("CPAS_API_KEY", "env-key")
    monkeypatch.setenv("CPAS_MAX_WORKERS", "7")
    monkeypatch.setenv("CPAS_FETCH_TIMEOUT", "1.5")
    monkeypatch.setenv("CPAS_LOG_LEVEL", "debug")

    cfg, _ = load_config(path)
    connection = resolve_connection(cfg)

    assert connection.base_url == "https://file.example"
    assert connection.api_key == "env-key"
    assert connection.port == "1"
    assert resolve_dispatch_settings(cfg).max_workers == 7
    assert resolve_dispatch_settings(cfg).fetch_timeout == 1.5
    assert cfg["logging"]["level"] == "DEBUG"


def test_invalid_numbers_fall_back_to_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path, "dispatch:\n  max_workers: lots\n  idle_timeout: -1\n  fetch_timeout: 0\n")
    monkeypatch.setenv("CPAS_MAX_WORKERS", "not-a-number")

    cfg, _ = load_config(path)

    assert resolve_dispatch_settings(cfg) == DispatchSettings()


def test_partial_connection_is_rejected(tmp_path: Path) -> None:
    cfg, _ = load_config(_write(tmp_path, "connection:\n  base_url: https://cpas.example\n"))
    with pytest.raises(ConfigurationError, match="api_key"):
        resolve_connection(cfg)


def test_dotenv_supplies_cpas_keys_only(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OTHER_SECRET", raising=False)
    (tmp_path / ".env").write_text(
        "export CPAS_API_KEY='dotenv-key'\nOTHER_SECRET=nope\n# comment\n",
        encoding="utf-8",
    )
    path = _write(tmp_path, "connection:\n  base_url: u\n  host: h\n  port: '2'\n")

    try:
        cfg, _ = load_config(path)
        assert resolve_connection(cfg).api_key == "dotenv-key"
        assert os.getenv("OTHER_SECRET") is None
    finally:
        os.environ.pop("CPAS_API_KEY", None)


def test_missing_file_and_non_mapping_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")
    with pytest.raises(ValueError, match="YAML object"):
        load_config(_write(tmp_path, "- a\n- b\n"))


def test_api_key_env_indirection_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="api_key_env"):
        load_config(_write(tmp_path, "connection:\n  api_key_env: MY_KEY\n"))
