"""Configuration loading and validation."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration is invalid."""

    pass


@dataclass
class BackendConfig:
    """Backend API configuration."""

    base_url: str
    timeout_seconds: float = 30.0


@dataclass
class ChainConfig:
    """TRON node and signing configuration."""

    full_node: str
    private_key: str
    api_key: str | None = None
    value_decimals: int = 6
    fee_limit: int = 1_000_000_000
    call_value: int = 0

    def __repr__(self) -> str:
        return (
            f"ChainConfig(full_node={self.full_node!r}, private_key='***', "
            f"value_decimals={self.value_decimals}, fee_limit={self.fee_limit}, "
            f"call_value={self.call_value})"
        )


@dataclass
class MonitorConfig:
    """Poll loop configuration."""

    interval_seconds: float = 60.0
    sleep_step_seconds: float = 1.0


@dataclass
class Config:
    """Main configuration container."""

    backend: BackendConfig
    chain: ChainConfig
    monitor: MonitorConfig


def load_config(path: str, env_path: str | None = None) -> Config:
    """Load configuration from a YAML file and the environment.

    The signing key is read from the environment variable named by
    ``chain.private_key_env`` (default PRIVATE_KEY) unless
    ``chain.private_key`` is set in the file; the optional TronGrid key
    likewise comes from ``chain.api_key_env`` (default TRONGRID_API_KEY).
    ``APP_URL`` in the environment overrides ``backend.base_url``.

    Args:
        path: Path to YAML configuration file
        env_path: Optional .env file to load first

    Returns:
        Config object with validated configuration

    Raises:
        ConfigError: If file not found, invalid YAML, missing required
            fields or no signing key
    """
    config_path = Path(path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    load_dotenv(dotenv_path=env_path)

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    if raw is None:
        raise ConfigError("Configuration file is empty")

    # Validate required sections
    required_sections = ["backend", "chain"]
    for section in required_sections:
        if section not in raw:
            raise ConfigError(f"Missing required configuration section: {section}")

    # Parse backend config
    backend_raw = raw["backend"] or {}
    base_url = os.environ.get("APP_URL") or backend_raw.get("base_url")
    if not base_url:
        raise ConfigError("Missing required setting: backend.base_url (or APP_URL)")
    backend = BackendConfig(
        base_url=base_url,
        timeout_seconds=backend_raw.get("timeout_seconds", 30.0),
    )

    # Parse chain config
    chain_raw = raw["chain"] or {}
    if not chain_raw.get("full_node"):
        raise ConfigError("Missing required setting: chain.full_node")

    key_env = chain_raw.get("private_key_env", "PRIVATE_KEY")
    private_key = chain_raw.get("private_key") or os.environ.get(key_env)
    if not private_key:
        raise ConfigError(f"Missing signing key: set {key_env} in the environment")

    api_key_env = chain_raw.get("api_key_env", "TRONGRID_API_KEY")

    chain = ChainConfig(
        full_node=chain_raw["full_node"],
        private_key=private_key,
        api_key=chain_raw.get("api_key") or os.environ.get(api_key_env),
        value_decimals=chain_raw.get("value_decimals", 6),
        fee_limit=chain_raw.get("fee_limit", 1_000_000_000),
        call_value=chain_raw.get("call_value", 0),
    )

    # Parse monitor config
    monitor_raw = raw.get("monitor") or {}
    monitor = MonitorConfig(
        interval_seconds=monitor_raw.get("interval_seconds", 60.0),
        sleep_step_seconds=monitor_raw.get("sleep_step_seconds", 1.0),
    )
    if monitor.interval_seconds < 0 or monitor.sleep_step_seconds <= 0:
        raise ConfigError("monitor.interval_seconds must be >= 0 and sleep_step_seconds > 0")

    config = Config(backend=backend, chain=chain, monitor=monitor)

    logger.info(f"Loaded configuration from {path}")
    logger.debug(f"Backend: {backend.base_url}")
    logger.debug(f"Chain: {chain.full_node}, decimals={chain.value_decimals}")
    logger.debug(f"Monitor: interval={monitor.interval_seconds}s")

    return config
