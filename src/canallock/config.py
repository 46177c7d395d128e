"""Configuration management for the canal lock simulator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError
from .simulator.constants import PhysicalConstants

logger = logging.getLogger(__name__)


def _load_dotenv(env_path: Path) -> None:
    """Load environment variables from .env file."""
    if not env_path.exists():
        return

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                # Only set if not already in environment
                if key not in os.environ:
                    os.environ[key] = value


@dataclass
class InitialConditions:
    """State the simulation starts in and returns to on reset.

    Levels in meters, displacement in m³, area in m².
    """

    upper_level: float = 26.0
    chamber_level: float = 10.0
    lower_level: float = 10.0
    ship_displacement: float = 70000.0
    ship_area: float = 6000.0
    time_scale: float = 10.0


@dataclass
class LockConfig:
    """Main configuration class for the lock simulator."""

    constants: PhysicalConstants = field(default_factory=PhysicalConstants)
    initial: InitialConditions = field(default_factory=InitialConditions)

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Wall seconds between simulation frames
    frame_interval: float = 1 / 60

    # Wall seconds between WebSocket snapshot pushes while running
    broadcast_interval: float = 0.25


def load_config(
    config_path: Path | None = None,
    env: str | None = None,
) -> LockConfig:
    """Load configuration from YAML files and environment variables.

    Configuration is loaded with the following priority (highest to lowest):
    1. Environment variables (CANALLOCK_*)
    2. Environment-specific config (development.yaml, production.yaml)
    3. Default config (default.yaml)
    4. Hardcoded defaults

    Args:
        config_path: Path to config directory. Defaults to project config/.
        env: Environment name. Defaults to CANALLOCK_ENV or "development".

    Returns:
        Loaded and validated LockConfig instance.

    Raises:
        ConfigurationError: If the resulting configuration is not physical.
    """
    config = LockConfig()

    if config_path is None:
        # Try relative to this file, then fall back to cwd
        module_dir = Path(__file__).parent
        config_path = module_dir.parent.parent / "config"
        if not config_path.exists():
            config_path = Path.cwd() / "config"

    _load_dotenv(config_path.parent / ".env")

    default_path = config_path / "default.yaml"
    if default_path.exists():
        config = _merge_yaml(config, default_path)
        logger.debug("Loaded default config from %s", default_path)

    if env is None:
        env = os.environ.get("CANALLOCK_ENV", "development")

    env_config_path = config_path / f"{env}.yaml"
    if env_config_path.exists():
        config = _merge_yaml(config, env_config_path)
        logger.debug("Loaded %s config from %s", env, env_config_path)

    config = _apply_env_overrides(config)
    validate_config(config)

    logger.info("Configuration loaded for environment: %s", env)
    return config


def _merge_section(obj: Any, data: dict[str, Any]) -> Any:
    """Return a copy of dataclass ``obj`` with known keys from ``data``."""
    known = {f.name for f in fields(obj)}
    updates = {key: float(value) for key, value in data.items() if key in known}
    for key in data:
        if key not in known:
            logger.warning("Ignoring unknown config key: %s", key)
    return replace(obj, **updates)


def _merge_yaml(config: LockConfig, path: Path) -> LockConfig:
    """Merge YAML file into config."""
    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return config

    if "constants" in data:
        config.constants = _merge_section(config.constants, data["constants"])

    if "initial" in data:
        config.initial = _merge_section(config.initial, data["initial"])

    if "api" in data:
        api = data["api"]
        config.api_host = api.get("host", config.api_host)
        config.api_port = api.get("port", config.api_port)

    if "simulation" in data:
        sim = data["simulation"]
        config.frame_interval = sim.get("frame_interval", config.frame_interval)
        config.broadcast_interval = sim.get(
            "broadcast_interval", config.broadcast_interval
        )

    config.log_level = data.get("log_level", config.log_level)

    return config


def _apply_env_overrides(config: LockConfig) -> LockConfig:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str | None, type[Any]]] = {
        "CANALLOCK_UPPER_LEVEL": ("initial", "upper_level", float),
        "CANALLOCK_CHAMBER_LEVEL": ("initial", "chamber_level", float),
        "CANALLOCK_LOWER_LEVEL": ("initial", "lower_level", float),
        "CANALLOCK_SHIP_DISPLACEMENT": ("initial", "ship_displacement", float),
        "CANALLOCK_SHIP_AREA": ("initial", "ship_area", float),
        "CANALLOCK_TIME_SCALE": ("initial", "time_scale", float),
        "CANALLOCK_CHAMBER_AREA": ("constants", "chamber_area", float),
        "CANALLOCK_CHAMBER_HEIGHT": ("constants", "chamber_height", float),
        "CANALLOCK_MAX_VALVE_FLOW": ("constants", "max_valve_flow", float),
        "CANALLOCK_API_HOST": ("api_host", None, str),
        "CANALLOCK_API_PORT": ("api_port", None, int),
        "CANALLOCK_LOG_LEVEL": ("log_level", None, str),
        "CANALLOCK_FRAME_INTERVAL": ("frame_interval", None, float),
        "CANALLOCK_BROADCAST_INTERVAL": ("broadcast_interval", None, float),
    }

    for env_var, (attr, sub_attr, converter) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                converted = converter(value)
                if sub_attr:
                    # PhysicalConstants is frozen, so sections are replaced
                    section = replace(getattr(config, attr), **{sub_attr: converted})
                    setattr(config, attr, section)
                else:
                    setattr(config, attr, converted)
                logger.debug("Applied env override: %s=%s", env_var, converted)
            except (ValueError, TypeError) as e:
                logger.warning("Invalid env var %s=%s: %s", env_var, value, e)

    return config


def validate_config(config: LockConfig) -> None:
    """Check that the configuration describes a physical lock.

    Raises:
        ConfigurationError: If a constant or level is negative, a level is
            above the chamber height, a required area is not positive, or
            the default ship does not fit.
    """
    for f in fields(config.constants):
        if getattr(config.constants, f.name) < 0:
            raise ConfigurationError(f"Constant {f.name} must not be negative")
    if config.constants.chamber_area <= 0:
        raise ConfigurationError("Chamber area must be positive")

    initial = config.initial
    height = config.constants.chamber_height
    for name in ("upper_level", "chamber_level", "lower_level"):
        level = getattr(initial, name)
        if level < 0:
            raise ConfigurationError(f"Initial {name} must not be negative")
        if level > height:
            raise ConfigurationError(
                f"Initial {name} {level} m is above the chamber height of {height} m"
            )
    if initial.ship_area >= config.constants.chamber_area:
        raise ConfigurationError(
            f"Ship area {initial.ship_area} m² does not fit in chamber "
            f"of {config.constants.chamber_area} m²"
        )
    if config.frame_interval <= 0:
        raise ConfigurationError("Frame interval must be positive")
