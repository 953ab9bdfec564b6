"""
API models and schemas for the FastAPI application.
"""

from datetime import date, datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field, validator

from catalog.models import Book, Borrowed, parse_borrow_date

MAX_NAME_LENGTH = 15


class BorrowRequest(BaseModel):
    """Loan details supplied when borrowing a book."""
    first_name: Optional[str] = Field("", alias="FirstName", description="Borrower first name")
    last_name: Optional[str] = Field("", alias="LastName", description="Borrower last name")
    from_: date = Field(..., alias="From", description="Loan start date (d.M.yyyy)")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {"FirstName": "Anna", "LastName": "Nováková", "From": "2.5.2025"}
        },
    }

    @validator('from_', pre=True)
    def parse_from(cls, v):
        """Parse the loan date and require it to be present."""
        parsed = parse_borrow_date(v)
        if parsed is None:
            raise ValueError('Borrow date is required')
        return parsed

    @validator('from_')
    def validate_not_in_future(cls, v):
        """Ensure the loan does not start in the future."""
        if v > date.today():
            raise ValueError('Borrow date cannot be in the future')
        return v

    def to_borrowed(self) -> Borrowed:
        return Borrowed(
            first_name=self.first_name or "",
            last_name=self.last_name or "",
            from_=self.from_,
        )


class BookRequest(BaseModel):
    """Book body for create and update requests."""
    name: str = Field(..., alias="Name", max_length=MAX_NAME_LENGTH, description="Book title")
    author: str = Field(..., alias="Author", description="Book author")
    borrowed: Optional[BorrowRequest] = Field(None, alias="Borrowed", description="Optional loan state")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {"Name": "Môj Príbeh", "Author": "Jozef Mak"}
        },
    }

    @validator('name')
    def validate_name(cls, v):
        """Ensure the title is not blank."""
        if not v.strip():
            raise ValueError('Name is required')
        return v

    @validator('author')
    def validate_author(cls, v):
        """Ensure the author is not blank."""
        if not v.strip():
            raise ValueError('Author is required')
        return v

    def to_book(self) -> Book:
        return Book(
            name=self.name,
            author=self.author,
            borrowed=self.borrowed.to_borrowed() if self.borrowed else None,
        )


class OperationResponse(BaseModel):
    """Outcome of a write operation on a single book."""
    book_id: int = Field(..., description="Book identifier")
    status: str = Field(..., description="What happened to the book")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")
    fields: Optional[Dict[str, str]] = Field(None, description="Validation messages by field")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    catalog_status: str = Field(..., description="Whether the catalog has been loaded")
    books: Optional[int] = Field(None, description="Number of books when loaded")
