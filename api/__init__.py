"""
FastAPI RESTful API for the Library Catalog.

This module provides a REST API for:
- Paginated book listing with availability filtering
- Creating, updating and deleting books
- Borrowing and returning books
- HTTP Basic authentication
"""
