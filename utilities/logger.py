"""
Logging system using structlog.
Provides structured logging with different output formats and levels.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Optional, Union
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Enable debug mode for call-site details in every event
    """
    
    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )
    
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    
    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())
    
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
    
    # Set up file logging if specified
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)
    
    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.
    
    Args:
        name: Logger name (usually __name__)
        
    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class CatalogLogger:
    """
    Logger for catalog requests with context management.
    Each request binds its action and book id once and then reports the outcome.
    """
    
    def __init__(self, name: str = "catalog"):
        self.logger = structlog.get_logger(name)
        self.context = {}
    
    def bind_context(self, **kwargs) -> 'CatalogLogger':
        """
        Bind context variables to the logger.
        
        Args:
            **kwargs: Context variables to bind
            
        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self
    
    def clear_context(self) -> 'CatalogLogger':
        """Clear all context variables."""
        self.context.clear()
        return self
    
    def log_request(self, payload: Any = None) -> None:
        """Log an incoming catalog request."""
        self.logger.info(
            "Catalog request received",
            payload=_describe(payload),
            **self.context
        )
    
    def log_success(self, **details) -> None:
        """Log a completed catalog request."""
        self.logger.info(
            "Catalog request completed",
            **details,
            **self.context
        )
    
    def log_not_found(self) -> None:
        """Log a request that targeted a missing book."""
        self.logger.warning(
            "Book not found",
            **self.context
        )
    
    def log_error(self, error: str, payload: Any = None) -> None:
        """Log a failed catalog request."""
        self.logger.error(
            "Catalog request failed",
            error=error,
            payload=_describe(payload),
            **self.context
        )


def _describe(payload: Any) -> Any:
    """Render pydantic payloads as plain dicts for structured output."""
    if payload is None:
        return None
    if hasattr(payload, "model_dump"):
        return payload.model_dump(mode="json", by_alias=True)
    return payload
