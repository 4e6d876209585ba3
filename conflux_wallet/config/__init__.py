"""
Configuration for the Conflux wallet client.

Loads settings from environment variables and an optional .env file and
exposes them as immutable values handed to each client at construction.
"""

from conflux_wallet.config.settings import (  # noqa: F401
    EnricherConfig,
    NodeConfig,
    ServerConfig,
    Settings,
    get_settings,
)

__all__ = ["EnricherConfig", "NodeConfig", "ServerConfig", "Settings", "get_settings"]
