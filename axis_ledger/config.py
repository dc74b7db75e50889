"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class LedgerConfig(BaseSettings):
    """Axis ledger service configuration"""

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_title: str = "Axis Ledger API"
    docs_url: str = "/api-docs"
    cors_origins: List[str] = ["*"]

    # Security configuration
    jwt_secret: Optional[str] = None  # Random per-process secret when unset
    jwt_algorithm: str = "HS256"
    jwt_expiry_minutes: int = 60
    admin_username: str = "admin"
    admin_password: Optional[str] = None  # Login is refused when unset

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    class Config:
        env_prefix = "AXIS_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
