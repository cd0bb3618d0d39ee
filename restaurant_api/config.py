"""Configuration management for the Restaurant API using Pydantic."""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_path: str = Field(
        default="./nocodb/restaurants.db",
        description="SQLite database file (or ':memory:')",
    )

    # Server Configuration
    server_host: str = Field(default="0.0.0.0", description="Server host")
    server_port: int = Field(default=8081, description="Server port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    def is_in_memory(self) -> bool:
        """Check if the database lives only in memory."""
        return self.database_path == ":memory:"

    def model_post_init(self, __context) -> None:
        """Validate configuration after initialization."""
        if self.is_in_memory():
            logger.warning("DATABASE_PATH is ':memory:' - data will not persist")


# Global config instance
config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global config
    if config is None:
        config = Config()
    return config


def setup_logging(cfg: Config | None = None) -> None:
    """Configure logging for the application."""
    if cfg is None:
        cfg = get_config()

    log_level = getattr(logging, cfg.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # python-multipart is chatty at DEBUG; "multipart" is its pre-0.0.13 logger name
    for name in ("python_multipart", "multipart"):
        logging.getLogger(name).setLevel(logging.WARNING)
