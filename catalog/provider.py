"""
Initial-data provider for the catalog.
Reads the bundled library file once and hands its records to the store.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

import structlog
from pydantic import ValidationError

from .models import Book, LibraryDocument

logger = structlog.get_logger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "data" / "library.json"


class DataUnavailableError(Exception):
    """The initial catalog data could not be produced."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Catalog data unavailable from {source}: {reason}")


class JSONFileProvider:
    """
    Supplies seed books from a JSON file shaped as
    ``{"Library": {"Book": [...]}}``.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize the provider.

        Args:
            path: Location of the library file (defaults to the bundled one)
        """
        self.path = Path(path) if path else DEFAULT_DATA_FILE

    def load(self) -> List[Book]:
        """
        Read and validate every book in the file.

        Returns:
            List of books in file order

        Raises:
            DataUnavailableError: If the file is missing, unreadable or malformed
        """
        source = str(self.path)
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            raise DataUnavailableError(source, "file not found")
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DataUnavailableError(source, str(e)) from e

        try:
            document = LibraryDocument.model_validate(raw)
        except ValidationError as e:
            raise DataUnavailableError(source, f"invalid library document: {e.error_count()} error(s)") from e

        logger.debug("Library file parsed", source=source, books=len(document.library.books))
        return document.library.books
