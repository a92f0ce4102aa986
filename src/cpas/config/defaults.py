"""Default configuration schema for the CPAS client.

"""

from __future__ import annotations

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "connection": {
        "base_url": "",
        "api_key": "",
        "host": "",
        "port": "",
    },
    "dispatch": {
        "max_workers": 5,
        "idle_timeout": 60.0,
        "fetch_timeout": 5.0,
    },
    "logging": {
        "level": "INFO",
        "dir": "",
    },
}
