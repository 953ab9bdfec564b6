"""
API configuration settings.
"""

from typing import List

from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""
    
    # API Settings
    api_title: str = "Library Catalog API"
    api_version: str = "1.0.0"
    api_description: str = """
    A REST API for a small library catalog.
    
    ## Features
    
    * **Books**: List books page by page, optionally only available or only borrowed ones
    * **Editing**: Create, update and delete books
    * **Loans**: Borrow and return books
    
    ## Authentication
    
    Every endpoint except `/health` requires HTTP Basic credentials.
    
    ## Persistence
    
    The catalog is seeded from a bundled file on first use; changes live in memory
    and are lost on restart.
    """
    
    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    
    # Security Settings
    api_username: str = "librarian"
    api_password: str = "change-me"
    
    # Pagination
    default_page_size: int = 3
    
    # CORS Settings
    cors_origins: List[str] = ["http://localhost:4200"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]
    
    # Logging
    log_level: str = "INFO"
    
    model_config = {
        "env_file": ".env",
        "extra": "ignore"  # Ignore extra fields from .env
    }


# Global config instance
config = APIConfig()
