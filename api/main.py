"""
FastAPI main application for the Library Catalog API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.auth import verify_credentials
from api.config import config as api_config
from api.models import (
    BookRequest, BorrowRequest, ErrorResponse, HealthResponse, OperationResponse
)
from catalog.models import Book
from catalog.provider import DataUnavailableError, JSONFileProvider
from catalog.store import CatalogStore
from utilities.config import config
from utilities.logger import CatalogLogger, get_logger, setup_logging

# Setup logging
logger = get_logger(__name__)

# Process-wide catalog; loads its seed data on first use
catalog_store = CatalogStore(JSONFileProvider(config.get_data_file_path()))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )
    logger.info("Starting Library Catalog API", data_file=config.data_file)
    
    yield
    
    logger.info("Shutting down Library Catalog API")


# Create FastAPI application
app = FastAPI(
    title=api_config.api_title,
    description=api_config.api_description,
    version=api_config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            status_code=exc.status_code
        ).model_dump(),
        headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Report invalid input as 400 with one message per field."""
    fields = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        key = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        elif error.get("type") == "missing":
            message = f"{loc[-1] if loc else 'Value'} is required"
        fields.setdefault(key, message)
    
    logger.warning("Request validation failed", path=request.url.path, fields=fields)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="Validation failed",
            status_code=status.HTTP_400_BAD_REQUEST,
            fields=fields
        ).model_dump()
    )


@app.exception_handler(DataUnavailableError)
async def data_unavailable_handler(request, exc: DataUnavailableError):
    """Handle a catalog that could not be loaded."""
    logger.error("Catalog data unavailable", source=exc.source, error=exc.reason, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Catalog data unavailable",
            detail=str(exc) if api_config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc) if api_config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


def _not_found(book_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Book with ID '{book_id}' not found"
    )


# Health check endpoint (no authentication required)
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint; never triggers the catalog load."""
    loaded = catalog_store.is_loaded
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=api_config.api_version,
        catalog_status="loaded" if loaded else "not_loaded",
        books=catalog_store.count() if loaded else None
    )


# Books endpoints
@app.get("/library/books", response_model=List[Book], tags=["Books"])
async def get_books(
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int = Query(api_config.default_page_size, gt=0, description="Books per page"),
    available: Optional[bool] = Query(None, description="True for available books, false for borrowed ones"),
    username: str = Depends(verify_credentials)
):
    """
    Get one page of books, optionally filtered by availability.
    
    - **page**: Page number (starts from 0)
    - **size**: Items per page
    - **available**: Omit for all books
    """
    try:
        return catalog_store.query(page, size, available)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@app.get("/library/book/{book_id}", response_model=Book, tags=["Books"])
async def get_book(book_id: int, username: str = Depends(verify_credentials)):
    """Get a single book by ID."""
    book = catalog_store.get(book_id)
    if book is None:
        raise _not_found(book_id)
    return book


@app.post(
    "/library/book",
    response_model=Book,
    status_code=status.HTTP_201_CREATED,
    tags=["Books"]
)
async def create_book(
    book: BookRequest = Body(...),
    username: str = Depends(verify_credentials)
):
    """
    Add a new book. The catalog assigns its ID.
    
    - **Name**: Required, at most 15 characters
    - **Author**: Required
    - **Borrowed**: Optional; when present **From** is required and not in the future
    """
    request_log = CatalogLogger().bind_context(action="create")
    request_log.log_request(book)
    try:
        created = catalog_store.create(book.to_book())
    except DataUnavailableError as e:
        request_log.log_error(str(e), book)
        raise
    
    request_log.bind_context(book_id=created.id).log_success()
    return created


@app.put("/library/book/{book_id}", response_model=OperationResponse, tags=["Books"])
async def update_book(
    book_id: int,
    book: BookRequest = Body(...),
    username: str = Depends(verify_credentials)
):
    """Replace an existing book, keeping its ID and position."""
    request_log = CatalogLogger().bind_context(action="update", book_id=book_id)
    request_log.log_request(book)
    try:
        updated = catalog_store.update(book_id, book.to_book())
    except DataUnavailableError as e:
        request_log.log_error(str(e), book)
        raise
    
    if not updated:
        request_log.log_not_found()
        raise _not_found(book_id)
    
    request_log.log_success()
    return OperationResponse(book_id=book_id, status="updated")


@app.delete("/library/book/{book_id}", response_model=OperationResponse, tags=["Books"])
async def delete_book(book_id: int, username: str = Depends(verify_credentials)):
    """Delete a book by ID."""
    request_log = CatalogLogger().bind_context(action="delete", book_id=book_id)
    request_log.log_request()
    try:
        deleted = catalog_store.delete(book_id)
    except DataUnavailableError as e:
        request_log.log_error(str(e))
        raise
    
    if not deleted:
        request_log.log_not_found()
        raise _not_found(book_id)
    
    request_log.log_success()
    return OperationResponse(book_id=book_id, status="deleted")


# Loan endpoints
@app.patch("/library/book/{book_id}/borrow", response_model=OperationResponse, tags=["Loans"])
async def borrow_book(
    book_id: int,
    borrowed: BorrowRequest = Body(...),
    username: str = Depends(verify_credentials)
):
    """
    Mark a book as borrowed. The loan details replace any previous ones.
    
    - **From**: Required, d.M.yyyy, not in the future
    - **FirstName** / **LastName**: Optional
    """
    request_log = CatalogLogger().bind_context(action="borrow", book_id=book_id)
    request_log.log_request(borrowed)
    try:
        found = catalog_store.borrow(book_id, borrowed.to_borrowed())
    except DataUnavailableError as e:
        request_log.log_error(str(e), borrowed)
        raise
    
    if not found:
        request_log.log_not_found()
        raise _not_found(book_id)
    
    request_log.log_success()
    return OperationResponse(book_id=book_id, status="borrowed")


@app.patch("/library/book/{book_id}/return", response_model=OperationResponse, tags=["Loans"])
async def return_book(book_id: int, username: str = Depends(verify_credentials)):
    """
    Mark a book as returned.
    
    Responds 404 both when the book does not exist and when it is not on loan.
    """
    request_log = CatalogLogger().bind_context(action="return", book_id=book_id)
    request_log.log_request()
    try:
        returned = catalog_store.return_book(book_id)
    except DataUnavailableError as e:
        request_log.log_error(str(e))
        raise
    
    if not returned:
        request_log.log_not_found()
        raise _not_found(book_id)
    
    request_log.log_success()
    return OperationResponse(book_id=book_id, status="returned")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level=api_config.log_level.lower()
    )
