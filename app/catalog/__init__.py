"""
Catalog package for the menu API.

This package holds the categorized listing store, its schemas and the
routes that expose it under ``/api/menu``. The store keeps everything
in memory and mirrors it to a JSON snapshot after each change; should
your needs evolve, it is the one place to swap in a database.
"""

from .router import router as catalog_router  # noqa: F401
