"""
In-memory catalog store.

Owns the authoritative list of books. The list is loaded once from the
initial-data provider on first access and kept for the life of the process.
Every read hands out copies and every write stores copies, so the store is
the only code that ever touches the live records.
"""

import threading
from typing import List, Optional

import structlog

from .models import Book, Borrowed
from .provider import DataUnavailableError, JSONFileProvider

logger = structlog.get_logger(__name__)


class CatalogStore:
    """
    Thread-safe store for the book catalog.
    Loading is guarded by its own lock so the provider runs at most once;
    reads and writes are serialized by the catalog lock.
    """

    def __init__(self, provider: JSONFileProvider):
        """
        Initialize the store without touching the provider.

        Args:
            provider: Object with a ``load()`` method returning the seed books
        """
        self.provider = provider
        self._books: Optional[List[Book]] = None
        self._load_lock = threading.Lock()
        self._lock = threading.RLock()

    @property
    def is_loaded(self) -> bool:
        return self._books is not None

    def ensure_loaded(self) -> None:
        """
        Populate the catalog from the provider if that has not happened yet.

        Raises:
            DataUnavailableError: If the provider cannot supply data
        """
        self._load()

    def _load(self) -> List[Book]:
        """Return the live catalog list, loading it on first use."""
        books = self._books
        if books is not None:
            return books

        with self._load_lock:
            if self._books is None:
                try:
                    records = self.provider.load()
                except DataUnavailableError as e:
                    logger.error("Failed to load catalog", source=e.source, error=e.reason)
                    raise
                except Exception as e:
                    logger.error("Failed to load catalog", error=str(e))
                    raise DataUnavailableError(type(self.provider).__name__, str(e)) from e

                if records is None:
                    raise DataUnavailableError(type(self.provider).__name__, "provider returned no data")

                self._books = self._normalize(records)
                logger.info("Catalog loaded", books=len(self._books))
            return self._books

    @staticmethod
    def _normalize(records: List[Book]) -> List[Book]:
        """Copy seed records, filling in missing loan state and ids."""
        books = [record.model_copy(deep=True) for record in records]

        seen = set()
        for book in books:
            if book.id is None:
                continue
            if book.id in seen:
                raise DataUnavailableError("seed data", f"duplicate book id {book.id}")
            seen.add(book.id)

        next_id = max(seen, default=0) + 1
        for book in books:
            if book.borrowed is None:
                book.borrowed = Borrowed()
            if book.id is None:
                book.id = next_id
                next_id += 1
        return books

    @staticmethod
    def _find_index(books: List[Book], book_id: int) -> Optional[int]:
        for index, book in enumerate(books):
            if book.id == book_id:
                return index
        return None

    def list(self) -> List[Book]:
        """Return copies of every book in catalog order."""
        books = self._load()
        with self._lock:
            return [book.model_copy(deep=True) for book in books]

    def count(self) -> int:
        books = self._load()
        with self._lock:
            return len(books)

    def get(self, book_id: int) -> Optional[Book]:
        """
        Look up a single book.

        Args:
            book_id: Catalog identifier

        Returns:
            A copy of the book, or None if no book has that id
        """
        books = self._load()
        with self._lock:
            index = self._find_index(books, book_id)
            if index is None:
                return None
            return books[index].model_copy(deep=True)

    def create(self, book: Book) -> Book:
        """
        Add a book under a fresh id.

        The id is one more than the largest id in the catalog (1 when empty);
        any id on the input is ignored.

        Args:
            book: Book to add; it is copied, never aliased

        Returns:
            A copy of the stored book carrying its assigned id
        """
        books = self._load()
        new_book = book.model_copy(deep=True)
        if new_book.borrowed is None:
            new_book.borrowed = Borrowed()

        with self._lock:
            new_book.id = max((b.id for b in books), default=0) + 1
            books.append(new_book)
            logger.debug("Book created", book_id=new_book.id, name=new_book.name)
            return new_book.model_copy(deep=True)

    def update(self, book_id: int, book: Book) -> bool:
        """
        Replace the book with the given id, keeping its position.

        Args:
            book_id: Identifier of the book to replace
            book: New contents; its own id is overridden with ``book_id``

        Returns:
            True if a book was replaced, False if none has that id
        """
        books = self._load()
        replacement = book.model_copy(deep=True)
        replacement.id = book_id
        if replacement.borrowed is None:
            replacement.borrowed = Borrowed()

        with self._lock:
            index = self._find_index(books, book_id)
            if index is None:
                return False
            books[index] = replacement
            logger.debug("Book updated", book_id=book_id)
            return True

    def delete(self, book_id: int) -> bool:
        """Remove the book with the given id; False if there is none."""
        books = self._load()
        with self._lock:
            index = self._find_index(books, book_id)
            if index is None:
                return False
            del books[index]
            logger.debug("Book deleted", book_id=book_id)
            return True

    def borrow(self, book_id: int, borrowed: Borrowed) -> bool:
        """
        Put a book on loan.

        The loan state is replaced as a whole, so a re-borrow clears any
        borrower fields the new value leaves empty. Books already on loan
        are not rejected.

        Args:
            book_id: Identifier of the book
            borrowed: New loan state

        Returns:
            True if the book exists, False otherwise
        """
        books = self._load()
        loan = borrowed.model_copy(deep=True) if borrowed is not None else Borrowed()

        with self._lock:
            index = self._find_index(books, book_id)
            if index is None:
                return False
            books[index].borrowed = loan
            logger.debug("Book borrowed", book_id=book_id, since=str(loan.from_))
            return True

    def return_book(self, book_id: int) -> bool:
        """
        Mark a book as returned.

        Returns:
            True if the book was on loan and is now available; False if no
            book has that id or the book was not on loan
        """
        books = self._load()
        with self._lock:
            index = self._find_index(books, book_id)
            if index is None:
                return False
            book = books[index]
            if book.is_available:
                return False
            book.borrowed = Borrowed()
            logger.debug("Book returned", book_id=book_id)
            return True

    def query(self, page: int, size: int, available: Optional[bool] = None) -> List[Book]:
        """
        Get one page of books, optionally filtered by availability.

        The filter runs over the whole catalog first; the page window is
        then taken from the filtered sequence in catalog order.

        Args:
            page: Zero-based page index
            size: Page length
            available: True for books not on loan, False for books on loan,
                None for no filter

        Returns:
            Copies of the books on the page; empty past the last page

        Raises:
            ValueError: If page is negative or size is not positive
        """
        if page < 0:
            raise ValueError("page must be greater than or equal to 0")
        if size <= 0:
            raise ValueError("size must be greater than 0")

        books = self._load()
        with self._lock:
            if available is None:
                matches = books
            else:
                matches = [b for b in books if b.is_available == available]

            start = page * size
            if start > len(matches):
                return []
            return [b.model_copy(deep=True) for b in matches[start:start + size]]
