"""
Pydantic models for catalog data validation and serialization.
Field aliases match the JSON layout of the bundled library file.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, validator

BORROW_DATE_FORMAT = "%d.%m.%Y"


def parse_borrow_date(value) -> Optional[date]:
    """
    Parse a loan start date.

    Accepts ``d.M.yyyy`` strings, ISO ``yyyy-mm-dd`` strings and date
    objects. Empty values mean the book is not on loan.

    Args:
        value: Raw value from JSON or Python callers

    Returns:
        The parsed date, or None when the value is empty
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.strptime(text, BORROW_DATE_FORMAT).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text)
        except ValueError:
            raise ValueError(f"'{value}' is not a date in d.M.yyyy format")
    raise ValueError(f"Unsupported date value: {value!r}")


def format_borrow_date(value: date) -> str:
    """Render a date as ``d.M.yyyy`` without zero padding."""
    return f"{value.day}.{value.month}.{value.year}"


class Borrowed(BaseModel):
    """
    Loan state embedded in every book.
    A book is on loan exactly when ``from_`` is set.
    """
    first_name: str = Field("", alias="FirstName", description="Borrower first name")
    last_name: str = Field("", alias="LastName", description="Borrower last name")
    from_: Optional[date] = Field(None, alias="From", description="Loan start date")

    model_config = {
        "populate_by_name": True,
    }

    @validator('first_name', 'last_name', pre=True)
    def default_empty_name(cls, v):
        """Treat missing borrower names as empty text."""
        return "" if v is None else v

    @validator('from_', pre=True)
    def parse_from(cls, v):
        """Accept d.M.yyyy, ISO dates and empty values."""
        return parse_borrow_date(v)

    @field_serializer('from_', when_used='json-unless-none')
    def serialize_from(self, v: date) -> str:
        return format_borrow_date(v)

    @property
    def is_borrowed(self) -> bool:
        return self.from_ is not None


class Book(BaseModel):
    """A single catalog entry."""
    id: Optional[int] = Field(None, description="Catalog-assigned identifier")
    name: str = Field(..., alias="Name", description="Book title")
    author: str = Field(..., alias="Author", description="Book author")
    borrowed: Optional[Borrowed] = Field(None, alias="Borrowed", description="Loan state")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "id": 1,
                "Name": "Môj Príbeh",
                "Author": "Jozef Mak",
                "Borrowed": {
                    "FirstName": "Anna",
                    "LastName": "Nováková",
                    "From": "2.5.2025",
                },
            }
        },
    }

    @property
    def is_available(self) -> bool:
        """True when the book is not on loan."""
        return self.borrowed is None or not self.borrowed.is_borrowed


class Library(BaseModel):
    """The ``Library`` object of the seed file."""
    books: List[Book] = Field(default_factory=list, alias="Book")

    model_config = {
        "populate_by_name": True,
    }


class LibraryDocument(BaseModel):
    """Top-level wrapper of the seed file: ``{"Library": {"Book": [...]}}``."""
    library: Library = Field(..., alias="Library")

    model_config = {
        "populate_by_name": True,
    }
