"""
Configuration management using environment variables.
Handles catalog settings with proper validation and defaults.
"""

from typing import Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from pathlib import Path

from catalog.provider import DEFAULT_DATA_FILE


class CatalogConfig(BaseSettings):
    """
    Configuration class for catalog settings.
    Uses pydantic BaseSettings for environment variable management.
    """
    
    # Seed data
    data_file: str = Field(default=str(DEFAULT_DATA_FILE), env="DATA_FILE")
    
    # Logging Configuration
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="json", env="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, env="LOG_FILE")
    
    # Development
    debug: bool = Field(default=False, env="DEBUG")
    
    @validator('log_level')
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()
    
    @validator('log_format')
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()
    
    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env
    
    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None
    
    def get_data_file_path(self) -> Path:
        """Get seed data file path as Path object."""
        return Path(self.data_file)


# Global configuration instance
config = CatalogConfig()
