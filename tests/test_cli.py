from __future__ import annotations

import json
from pathlib import Path

import pytest

from _fakes import BAN_INFO_BODY, FakeSession
from cpas import cli
from cpas.client import CpasClient


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in ["CPAS_BASE_URL", "CPAS_API_KEY", "CPAS_HOST", "CPAS_PORT", "CPAS_LOG_LEVEL"]:
        monkeypatch.delenv(key, raising=False)
    path = tmp_path / "cpas.yaml"
    path.write_text(
        "connection:\n  base_url: https://cpas.example\n  api_key: k\n  host: h\n  port: '1'\n",
        encoding="utf-8",
    )
    return path


def _patch_session(monkeypatch: pytest.MonkeyPatch, fake_session: FakeSession) -> None:
    original_init = CpasClient.__init__

    def init(self, connection=None, *, settings=None, **_ignored):
        original_init(self, connection, settings=settings, session=fake_session)

    monkeypatch.setattr(CpasClient, "__init__", init)
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


def test_ban_info_prints_json(config_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    session = FakeSession(lambda url: BAN_INFO_BODY)
    _patch_session(monkeypatch, session)

    cli.main(["ban-info", str(config_path), "gid"])

    assert json.loads(capsys.readouterr().out) == {"duration": 0, "reason": "Banned"}
    assert "/banInfo/" in session.urls[0]


def test_ban_passes_admins_minutes_and_reason(config_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    session = FakeSession(lambda url: '{"success": true}')
    _patch_session(monkeypatch, session)

    cli.main(["ban", str(config_path), "gid", "Nick", "b", "--admin", "a1", "--admin", "a2", "--minutes", "15"])

    assert json.loads(capsys.readouterr().out)["success"] is True
    segments = session.urls[0].split("/")
    assert len(segments[-3].split(",")) == 2
    assert segments[-2] == "15"


def test_error_outcome_exits_with_message(config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_session(monkeypatch, FakeSession(lambda url: "{}"))

    with pytest.raises(SystemExit, match="cpas ban-history failed: .*bans"):
        cli.main(["ban-history", str(config_path), "gid", "--count", "3"])


def test_missing_config_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="cpas info failed"):
        cli.main(["info", str(tmp_path / "nope.yaml"), "gid"])


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])
