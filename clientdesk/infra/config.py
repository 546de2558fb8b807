"""
Configuration management using Pydantic Settings.

Architecture Decision: Why pydantic-settings?
- Type-safe configuration with validation
- Supports multiple sources (YAML, env vars, defaults)
- Easy to test with different configurations
"""

import os
from pathlib import Path
from typing import Optional
import yaml

from pydantic_settings import BaseSettings, SettingsConfigDict
from clientdesk.domain.models import Preferences


class Settings(BaseSettings):
    """
    Application settings with multiple sources:
    1. Default values (hardcoded)
    2. YAML config file (fills what the environment left unset)
    3. Environment variables (highest priority)
    """
    model_config = SettingsConfigDict(
        env_prefix='CLIENTDESK_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Application paths
    app_name: str = "ClientDesk"
    config_dir: Optional[Path] = None
    data_dir: Optional[Path] = None
    storage_dir: Optional[Path] = None

    # Database
    database_url: Optional[str] = None

    # Authentication is external; the CLI acts as this user unless told otherwise
    default_user_id: Optional[str] = None

    log_level: str = "INFO"

    # User preferences
    preferences: Preferences = Preferences()

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._init_paths()
        self._load_yaml_config()

    def _init_paths(self):
        """Initialize default paths based on OS"""
        if self.config_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA'))
            else:  # Linux/Mac
                base = Path.home() / '.config'
            self.config_dir = base / self.app_name.lower()

        if self.data_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA'))
            else:  # Linux/Mac
                base = Path.home() / '.local' / 'share'
            self.data_dir = base / self.app_name.lower()

        if self.storage_dir is None:
            self.storage_dir = self.data_dir / 'storage'

        # Create directories if they don't exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _config_file(self) -> Path:
        # First check in workspace config folder
        config_file = Path("config/settings.yaml")
        if not config_file.exists():
            # Then check in user's config directory
            config_file = self.config_dir / "settings.yaml"
        return config_file

    def _load_yaml_config(self):
        """Load configuration from YAML file"""
        config_file = self._config_file()
        if not config_file.exists():
            return

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        prefs = config_data.get('preferences')
        if prefs:
            self.preferences = Preferences(**prefs)

        for key in ('database_url', 'default_user_id'):
            if getattr(self, key) is None and config_data.get(key):
                setattr(self, key, config_data[key])

        if config_data.get('storage_dir') and 'CLIENTDESK_STORAGE_DIR' not in os.environ:
            self.storage_dir = Path(config_data['storage_dir'])

        if config_data.get('log_level') and 'CLIENTDESK_LOG_LEVEL' not in os.environ:
            self.log_level = str(config_data['log_level']).upper()

    def save_preferences(self):
        """Save current preferences to YAML file"""
        config_file = self.config_dir / "settings.yaml"
        data = {}
        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        data['preferences'] = self.preferences.model_dump()
        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False)

    def get_db_url(self) -> str:
        """Get database URL, creating default if not set"""
        if self.database_url:
            return self.database_url

        db_path = self.data_dir / 'clientdesk.db'
        return f"sqlite+aiosqlite:///{db_path}"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

