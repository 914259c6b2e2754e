"""Application settings loader from YAML configuration."""
import yaml
from pathlib import Path
from dataclasses import dataclass

from finflow.utils.exceptions import ConfigError


DEFAULT_SETTINGS_PATH = Path(__file__).parent.parent / "resources" / "config.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int

    # LLM
    llm_model_name: str

    # Storage
    storage_file_name: str
    transactions_key: str
    recurring_key: str

    # Import defaults
    placeholder_description: str
    fallback_category: str
    fallback_type: str

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            config_path = DEFAULT_SETTINGS_PATH

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        try:
            return cls(
                app_name=config["app"]["name"],
                app_version=config["app"]["version"],
                log_level=config["logging"]["level"],
                log_max_file_size_mb=config["logging"]["max_file_size_mb"],
                log_backup_count=config["logging"]["backup_count"],
                llm_model_name=config["llm"]["model_name"],
                storage_file_name=config["storage"]["file_name"],
                transactions_key=config["storage"]["transactions_key"],
                recurring_key=config["storage"]["recurring_key"],
                placeholder_description=config["import"]["placeholder_description"],
                fallback_category=config["import"]["fallback_category"],
                fallback_type=config["import"]["fallback_type"]
            )
        except (KeyError, TypeError) as e:
            raise ConfigError(f"Invalid settings file {config_path}: missing {e}")


# Global settings instance
_settings: AppSettings = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
