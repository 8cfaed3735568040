"""Configuration: TOML profiles, Settings, LedgerConfig."""

from perception.config.settings import (
    LedgerConfig,
    Settings,
    configure_logging,
    get_settings,
    load_config,
)

__all__ = ["LedgerConfig", "Settings", "configure_logging", "get_settings", "load_config"]
