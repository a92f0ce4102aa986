from cpas.utils.env import env_float, env_int, env_str, load_dotenv_files
from cpas.utils.logging import parse_level, setup_logging
from cpas.utils.merge import deep_merge

__all__ = [
    "env_float",
    "env_int",
    "env_str",
    "load_dotenv_files",
    "parse_level",
    "setup_logging",
    "deep_merge",
]
