from __future__ import annotations

import pytest

from cpas.config import ConnectionConfig


@pytest.fixture
def connection() -> ConnectionConfig:
    return ConnectionConfig(base_url="https://cpas.example/api", api_key="secret", host="10.0.0.1", port="27015")
