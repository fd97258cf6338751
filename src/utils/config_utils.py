"""
Configuration management utilities for the sunrise-sunset sensor service
"""

import logging
import os
import json
import pytz
from dotenv import load_dotenv

from models.config import ServiceConfig

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))


class ConfigManager:
    """Utility class for managing configuration and environment setup"""

    @staticmethod
    def load_environment():
        """Load environment variables from .env file"""
        load_dotenv()

    @staticmethod
    def get_config_path() -> str:
        return os.getenv(
            "POSITIONS_CONFIG_PATH",
            os.path.join(PROJECT_ROOT, "positions_config.json"),
        )

    @staticmethod
    def get_storage_path() -> str:
        return os.getenv(
            "SENSORS_STORAGE_PATH", os.path.join(PROJECT_ROOT, "sensors.json")
        )

    @staticmethod
    async def load_service_config() -> ServiceConfig:
        """Load position sensors and timezone from the JSON config file"""
        config_path = ConfigManager.get_config_path()

        if not os.path.exists(config_path):
            logger.info(f"No config file at {config_path}, using defaults")
            return ConfigManager.override_service_config(ServiceConfig())

        try:
            with open(config_path, "r") as f:
                config_data = json.load(f)
            config = ServiceConfig(**config_data)
            logger.info(f"Loaded configuration with {len(config.positions)} positions")
            return ConfigManager.override_service_config(config)
        except Exception as e:
            logger.error(f"Error loading configuration: {e}")
            raise

    @staticmethod
    def override_service_config(config: ServiceConfig) -> ServiceConfig:
        """Override config with environment variables"""
        solar_timezone = os.getenv("SOLAR_TIMEZONE")

        if solar_timezone:
            config.timezone = solar_timezone
        if not config.timezone:
            config.timezone = "UTC"

        return config

    @staticmethod
    def validate_environment() -> bool:
        """Validate environment variables that must parse"""
        solar_timezone = os.getenv("SOLAR_TIMEZONE")
        if solar_timezone and solar_timezone not in pytz.all_timezones_set:
            logger.error(f"Unknown SOLAR_TIMEZONE: {solar_timezone}")
            return False

        api_port = os.getenv("API_PORT")
        if api_port and not api_port.isdigit():
            logger.error(f"API_PORT must be a number: {api_port}")
            return False

        return True

    @staticmethod
    def get_config_summary(config: ServiceConfig) -> dict:
        """Get a summary of the current configuration for logging/debugging"""
        return {
            "timezone": config.timezone,
            "total_positions": len(config.positions),
            "position_ids": [position.id for position in config.positions],
            "positions_with_fix": sum(
                1
                for position in config.positions
                if position.latitude is not None and position.longitude is not None
            ),
        }
