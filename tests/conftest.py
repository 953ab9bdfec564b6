"""
Pytest configuration and shared fixtures.
"""

import json
from datetime import date
from unittest.mock import Mock

import pytest

from catalog.models import Book, Borrowed
from catalog.provider import JSONFileProvider
from catalog.store import CatalogStore


@pytest.fixture
def sample_books():
    """One available and one borrowed book."""
    return [
        Book(id=1, name="A", author="Author A", borrowed=Borrowed()),
        Book(
            id=2,
            name="B",
            author="Author B",
            borrowed=Borrowed(first_name="Jana", last_name="Malá", from_=date(2024, 1, 1)),
        ),
    ]


@pytest.fixture
def mock_provider(sample_books):
    """Create a mock provider returning the sample books."""
    provider = Mock(spec=JSONFileProvider)
    provider.load.return_value = sample_books
    return provider


@pytest.fixture
def store(mock_provider):
    """Create a store backed by the mock provider."""
    return CatalogStore(mock_provider)


@pytest.fixture
def make_store():
    """Build a store seeded with the given books."""
    def _make(books):
        provider = Mock(spec=JSONFileProvider)
        provider.load.return_value = books
        return CatalogStore(provider)
    return _make


@pytest.fixture
def library_file(tmp_path):
    """Write a small library file in the bundled format."""
    document = {
        "Library": {
            "Book": [
                {
                    "id": 1,
                    "Name": "Hobit",
                    "Author": "J. R. R. Tolkien",
                    "Borrowed": {"FirstName": "Ján", "LastName": "Novák", "From": "12.3.2024"},
                },
                {
                    "id": 2,
                    "Name": "Proces",
                    "Author": "Franz Kafka",
                    "Borrowed": {"FirstName": "", "LastName": "", "From": None},
                },
                {
                    "id": 3,
                    "Name": "1984",
                    "Author": "George Orwell",
                },
            ]
        }
    }
    path = tmp_path / "library.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path
