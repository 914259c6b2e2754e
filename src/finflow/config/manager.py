"""User configuration manager."""
import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from finflow.utils.logger import default_data_dir
from finflow.utils.exceptions import ConfigError


API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


@dataclass
class Config:
    """User configuration."""
    gemini_api_key: str = ""
    data_dir: Optional[str] = None
    log_level: Optional[str] = None
    model_name: Optional[str] = None


class ConfigManager:
    """Manages user configuration stored as JSON under the data directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or default_data_dir()
        self.config_file = self.config_dir / "config.json"

    def load_config(self) -> Optional[Config]:
        """Load configuration from file, applying environment overrides.

        Returns None when neither a config file nor an API key in the
        environment is available.
        """
        env_key = self._api_key_from_env()

        if not self.config_file.exists():
            if env_key:
                return Config(gemini_api_key=env_key, data_dir=str(self.config_dir))
            return None

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
            config = Config(**config_dict)
        except (OSError, ValueError, TypeError) as e:
            raise ConfigError(f"Failed to load configuration: {e}")

        if env_key:
            config.gemini_api_key = env_key
        if not config.data_dir:
            config.data_dir = str(self.config_dir)
        return config

    def save_config(self, config: Config) -> None:
        """Save configuration to file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def validate_config(self, config: Config) -> tuple[bool, str]:
        """Validate configuration values."""
        if not config.gemini_api_key:
            return False, "Gemini API key is required"

        if config.data_dir and Path(config.data_dir).is_file():
            return False, "Data directory points to a file"

        if config.log_level and config.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return False, f"Unknown log level: {config.log_level}"

        return True, "Configuration is valid"

    @staticmethod
    def _api_key_from_env() -> Optional[str]:
        for name in API_KEY_ENV_VARS:
            value = os.getenv(name)
            if value:
                return value
        return None
