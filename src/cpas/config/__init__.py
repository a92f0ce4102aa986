from cpas.config.connection import ConfigurationHolder, ConnectionConfig, build_connection
from cpas.config.defaults import DEFAULT_CONFIG
from cpas.config.settings import DispatchSettings
from cpas.config.loader import load_config, resolve_connection, resolve_dispatch_settings

__all__ = [
    "ConfigurationHolder",
    "ConnectionConfig",
    "DEFAULT_CONFIG",
    "DispatchSettings",
    "build_connection",
    "load_config",
    "resolve_connection",
    "resolve_dispatch_settings",
]
