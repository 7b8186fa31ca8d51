"""
PixelGUI Configuration
======================

This module handles configuration loading for the converter.

Configuration Sources (in order of precedence):
    1. config.yaml file
    2. Default values

The converter reads no environment variables; every tunable lives in
the YAML file or is passed per request.

Example config.yaml:
    defaults:
      width: 64
      height: 36
      quality: ultra
      deduplicate: true
    server:
      port: 8080
    logging:
      level: DEBUG
      format: text

Example:
    from pixelgui.config import settings

    print(settings.defaults.width)
    print(settings.server.port)
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from pixelgui.models.generation import ConversionRequest


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AppConfig(BaseModel):
    """Application identification."""

    name: str = Field(default="pixelgui", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class LimitsConfig(BaseModel):
    """Upload limits enforced by the HTTP surface."""

    max_upload_mb: float = Field(
        default=100.0,
        gt=0,
        description="Largest accepted upload in megabytes",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="127.0.0.1", description="Bind host")
    port: int = Field(default=8001, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for PixelGUI.

    `defaults` seeds every conversion that does not override a value.
    """

    app: AppConfig = Field(default_factory=AppConfig)
    defaults: ConversionRequest = Field(default_factory=ConversionRequest)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults")

    return Settings.model_validate(config_data)


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
