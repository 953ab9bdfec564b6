"""
Tests for configuration and logging utilities.
"""

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from catalog.provider import DEFAULT_DATA_FILE
from utilities.config import CatalogConfig
from utilities.logger import CatalogLogger, get_logger, setup_logging


class TestCatalogConfig:
    """Test cases for CatalogConfig."""
    
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATA_FILE", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        config = CatalogConfig(_env_file=None)
        
        assert config.get_data_file_path() == DEFAULT_DATA_FILE
        assert config.log_level == "INFO"
        assert config.get_log_file_path() is None
    
    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATA_FILE", str(tmp_path / "books.json"))
        monkeypatch.setenv("LOG_FORMAT", "CONSOLE")
        config = CatalogConfig(_env_file=None)
        
        assert config.get_data_file_path() == tmp_path / "books.json"
        assert config.log_format == "console"
    
    def test_log_level_normalized(self):
        assert CatalogConfig(log_level="debug").log_level == "DEBUG"
    
    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            CatalogConfig(log_level="LOUD")
    
    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            CatalogConfig(log_format="xml")


class TestLogging:
    """Test cases for logging helpers."""
    
    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "catalog.log"
        
        setup_logging(log_level="INFO", log_format="json", log_file=log_file)
        
        assert log_file.parent.exists()
    
    def test_catalog_logger_binds_context(self):
        request_log = CatalogLogger().bind_context(action="delete", book_id=3)
        
        with capture_logs() as logs:
            request_log.log_request()
            request_log.log_not_found()
        
        assert logs[0]["event"] == "Catalog request received"
        assert logs[0]["action"] == "delete"
        assert logs[1]["log_level"] == "warning"
        assert logs[1]["book_id"] == 3
    
    def test_catalog_logger_renders_models(self):
        from catalog.models import Book
        
        with capture_logs() as logs:
            CatalogLogger().log_request(Book(name="Dune", author="Frank Herbert"))
        
        assert logs[0]["payload"]["Name"] == "Dune"
    
    def test_get_logger_emits_structured_events(self):
        with capture_logs() as logs:
            get_logger("api.auth").warning("Invalid credentials", username="guest")
        
        assert logs[0]["event"] == "Invalid credentials"
        assert logs[0]["username"] == "guest"
    
    def test_clear_context(self):
        request_log = CatalogLogger().bind_context(action="create")
        
        request_log.clear_context()
        
        assert request_log.context == {}
