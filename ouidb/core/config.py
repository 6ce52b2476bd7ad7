"""
Configuration management for the OUI vendor database.

Loads configuration from YAML files and environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class DatabaseConfig:
    """Manuf source configuration."""

    manuf_path: str = "data/manuf.txt"
    max_reported_errors: int = 20  # per-line errors kept in the load report


@dataclass
class CacheConfig:
    """Binary export cache configuration."""

    enabled: bool = True
    db_path: str = "data/ouidb_cache.db"


@dataclass
class WebConfig:
    """Lookup API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            config = cls()
            config._apply_env_overrides()
            return config

        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create config from dictionary."""
        config = cls()

        if "database" in data:
            config.database = DatabaseConfig(**data["database"])

        if "cache" in data:
            config.cache = CacheConfig(**data["cache"])

        if "web" in data:
            config.web = WebConfig(**data["web"])

        if "logging" in data:
            config.logging = LoggingConfig(**data["logging"])

        # Override with environment variables
        config._apply_env_overrides()

        return config

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        # Database settings
        if os.getenv("OUI_DB_PATH"):
            self.database.manuf_path = os.getenv("OUI_DB_PATH")

        # Cache settings
        if os.getenv("OUIDB_CACHE_ENABLED"):
            self.cache.enabled = os.getenv("OUIDB_CACHE_ENABLED").lower() == "true"
        if os.getenv("OUIDB_CACHE_PATH"):
            self.cache.db_path = os.getenv("OUIDB_CACHE_PATH")

        # Web settings
        if os.getenv("WEB_HOST"):
            self.web.host = os.getenv("WEB_HOST")
        if os.getenv("WEB_PORT"):
            self.web.port = int(os.getenv("WEB_PORT"))

        # Logging
        if os.getenv("LOG_LEVEL"):
            self.logging.level = os.getenv("LOG_LEVEL")

    def to_yaml(self, path: str):
        """Save configuration to YAML file."""
        data = {
            "database": {
                "manuf_path": self.database.manuf_path,
                "max_reported_errors": self.database.max_reported_errors,
            },
            "cache": {
                "enabled": self.cache.enabled,
                "db_path": self.cache.db_path,
            },
            "web": {
                "host": self.web.host,
                "port": self.web.port,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file_path": self.logging.file_path,
                "max_file_size_mb": self.logging.max_file_size_mb,
                "backup_count": self.logging.backup_count,
            },
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    # Check common locations
    candidates = [
        Path("config/config.yaml"),
        Path("config.yaml"),
        Path.home() / ".ouidb" / "config.yaml",
        Path("/etc/ouidb/config.yaml"),
    ]

    for path in candidates:
        if path.exists():
            return str(path)

    # Return the first candidate as default
    return str(candidates[0])
