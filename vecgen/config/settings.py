import os
import json
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class Settings:
    """Configuration management with environment variable support"""

    DEFAULT_CONFIG = {
        "width": 800,
        "height": 600,
        "palette_file": "",
        "max_nodes": 10000,
        "sequence_limit": 1000000,
        "prime_search_limit": 100000,
        "animation_period_ms": 5000,
        "frame_rate": 30,
        "web_port": 5001,
        "log_level": "INFO",
    }

    @classmethod
    def load(cls, config_file=None):
        """Load configuration from file, environment and defaults"""
        load_dotenv()
        config = cls.DEFAULT_CONFIG.copy()

        # Load from file if exists
        if config_file and os.path.exists(config_file):
            try:
                with open(config_file, "r") as f:
                    file_config = json.load(f)
                    config.update(file_config)
            except (OSError, ValueError) as e:
                logger.error(f"Error loading config file {config_file}: {e}")

        # Override with environment variables
        for key in config:
            env_key = f"VECGEN_{key.upper()}"
            if env_key in os.environ:
                value = os.environ[env_key]

                # Type conversion
                try:
                    if isinstance(config[key], bool):
                        config[key] = value.lower() in ("true", "yes", "1")
                    elif isinstance(config[key], int):
                        config[key] = int(value)
                    else:
                        config[key] = value
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_key}: {value!r}")

        return config

    @staticmethod
    def setup_logging(log_level):
        """Configure logging based on config"""
        numeric_level = getattr(logging, str(log_level).upper(), None)
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO

        logging.basicConfig(
            level=numeric_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        return logging.getLogger("vecgen")
