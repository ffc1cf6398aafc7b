# app/errors.py
"""
Typed failures raised by the catalog store and the asset manager.

Every error carries the HTTP status the routes answer with, so the
web layer never has to guess how a failure should be reported.
"""


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(CatalogError):
    """Unknown listing id or asset name."""

    status_code = 404


class UnsupportedMediaTypeError(CatalogError):
    status_code = 400


class PayloadTooLargeError(CatalogError):
    status_code = 413


class PersistenceError(CatalogError):
    """Snapshot or blob I/O fault."""

    status_code = 500
