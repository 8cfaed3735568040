"""TOML config loading, profiles and the explicit ledger configuration."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from perception.errors import ConfigurationError

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"

MODULE_ADDRESS_ENV = "PERCEPTION_MODULE_ADDRESS"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = _find_config_dir(config_dir)
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class LedgerConfig(BaseModel):
    """Where the contract lives. Built once and passed to every component that talks to the ledger."""

    node_url: str = "https://fullnode.testnet.aptoslabs.com/v1"
    module_address: str = ""
    module_name: str = "perception_market"
    request_timeout_sec: float = Field(15.0, gt=0)

    def function_id(self, name: str) -> str:
        """Fully qualified entry/view function id: <address>::<module>::<name>."""
        if not self.module_address:
            raise ConfigurationError(
                f"Module address not configured. Set [ledger].module_address or {MODULE_ADDRESS_ENV}."
            )
        return f"{self.module_address}::{self.module_name}::{name}"


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        ledger: dict[str, Any] | None = None,
        transactions: dict[str, Any] | None = None,
        cache: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.ledger = ledger or {}
        self.transactions = transactions or {}
        self.cache = cache or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            ledger=raw.get("ledger"),
            transactions=raw.get("transactions"),
            cache=raw.get("cache"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def node_url(self) -> str:
        return self.ledger.get("node_url", "https://fullnode.testnet.aptoslabs.com/v1")

    @property
    def module_address(self) -> str:
        return os.environ.get(MODULE_ADDRESS_ENV) or self.ledger.get("module_address", "")

    @property
    def module_name(self) -> str:
        return self.ledger.get("module_name", "perception_market")

    @property
    def request_timeout_sec(self) -> float:
        return float(self.ledger.get("request_timeout_sec", 15.0))

    @property
    def confirm_timeout_sec(self) -> float:
        return float(self.transactions.get("confirm_timeout_sec", 60.0))

    @property
    def poll_interval_sec(self) -> float:
        return float(self.transactions.get("poll_interval_sec", 1.0))

    @property
    def refresh_interval_sec(self) -> float:
        return float(self.cache.get("refresh_interval_sec", 10.0))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)

    def ledger_config(self) -> LedgerConfig:
        return LedgerConfig(
            node_url=self.node_url,
            module_address=self.module_address,
            module_name=self.module_name,
            request_timeout_sec=self.request_timeout_sec,
        )


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
