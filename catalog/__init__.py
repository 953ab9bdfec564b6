"""
Catalog package: the in-memory book catalog and its loan state.

This package contains:
- Book and loan models
- The initial-data provider for the bundled seed file
- The catalog store with its paginated, filtered read path
"""

__version__ = "1.0.0"
