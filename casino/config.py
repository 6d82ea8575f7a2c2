"""
Configuration management for the roulette engine.
Supports config.json (or the file named by ROULETTE_CONFIG_FILE) with
environment variable overrides.
All paths are resolved relative to the project root.
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

# Project root directory (parent of 'casino' folder)
PROJECT_ROOT = Path(__file__).parent.parent


def get_env(key: str, default: str = None) -> Optional[str]:
    """Get environment variable with optional default."""
    return os.environ.get(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(key)
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes", "on")


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get float environment variable."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


# ==================== Configuration Models ====================

class TableConfig(BaseModel):
    starting_balance: float = 1000.0
    history_size: int = 100  # Rounds kept per session
    chip_values: List[float] = Field(default_factory=lambda: [1.0, 5.0, 10.0, 25.0, 50.0, 100.0])
    clear_rig_after_settle: bool = True
    timezone: str = "America/Chicago"


class RngConfig(BaseModel):
    seed: Optional[int] = None  # None = secrets-backed wheel


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_to_file: bool = False
    formatter: str = "color"


class PathsConfig(BaseModel):
    """Relative paths resolve against PROJECT_ROOT; absolute paths are used as is."""
    config_file: str = Field(default_factory=lambda: get_env("ROULETTE_CONFIG_FILE", "config.json"))
    log_file: str = "data/roulette.log"

    def get_config_path(self) -> Path:
        return PROJECT_ROOT / self.config_file

    def get_log_path(self) -> Path:
        return PROJECT_ROOT / self.log_file


class AppConfig(BaseModel):
    """Main application configuration."""
    table: TableConfig = Field(default_factory=TableConfig)
    rng: RngConfig = Field(default_factory=RngConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)


# ==================== Configuration Loading ====================

def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from config.json with environment variable overrides.
    Environment variables take precedence over config.json values.
    """
    if config_path is None:
        config_path = PathsConfig().get_config_path()
    config_path = Path(config_path)

    data = {}

    if config_path.exists():
        with open(config_path, "r") as f:
            data = json.load(f)

    for section in ("table", "rng", "logging", "paths"):
        data.setdefault(section, {})

    # Apply environment variable overrides
    if get_env("ROULETTE_STARTING_BALANCE"):
        data["table"]["starting_balance"] = get_env_float("ROULETTE_STARTING_BALANCE", 1000.0)
    if get_env("ROULETTE_HISTORY_SIZE"):
        data["table"]["history_size"] = get_env_int("ROULETTE_HISTORY_SIZE", 100)
    if get_env("ROULETTE_CLEAR_RIG_AFTER_SETTLE"):
        data["table"]["clear_rig_after_settle"] = get_env_bool("ROULETTE_CLEAR_RIG_AFTER_SETTLE", True)
    if get_env("ROULETTE_TIMEZONE"):
        data["table"]["timezone"] = get_env("ROULETTE_TIMEZONE")

    if get_env("ROULETTE_RNG_SEED"):
        data["rng"]["seed"] = get_env_int("ROULETTE_RNG_SEED")

    if get_env("LOG_LEVEL"):
        data["logging"]["level"] = get_env("LOG_LEVEL")
    if get_env("LOG_TO_FILE"):
        data["logging"]["log_to_file"] = get_env_bool("LOG_TO_FILE")
    if get_env("LOG_FORMATTER"):
        data["logging"]["formatter"] = get_env("LOG_FORMATTER")
    if get_env("LOG_FILE"):
        data["paths"]["log_file"] = get_env("LOG_FILE")

    # The file that was read is the one save_config writes back to
    data["paths"]["config_file"] = str(config_path)

    return AppConfig(**data)


def save_config(config: AppConfig, config_path: Optional[Path] = None):
    """Save configuration to the file it was loaded from (or config_path)."""
    if config_path is None:
        config_path = config.paths.get_config_path()

    # Where the config lives is not stored inside it
    data = config.model_dump(exclude={"paths": {"config_file"}})

    with open(config_path, "w") as f:
        json.dump(data, f, indent=4)


# Global config instance
settings = load_config()
