"""
Application error taxonomy

Services raise these; app/main.py maps them to JSON responses.
"""
from typing import Optional


class ShopError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShopError):
    """Missing required fields, bad enum value, bad export format"""

    status_code = 400


class NotFoundError(ShopError):
    """Unknown order, product, banner or download file"""

    status_code = 404


class AuthorizationError(ShopError):
    """Missing, invalid or expired credential or download token"""

    status_code = 401


class TransactionFailure(ShopError):
    """A datastore error inside a transactional operation (already rolled back)"""

    status_code = 500

    def __init__(self, message: str = "Server error", details: Optional[str] = None):
        super().__init__(message)
        self.details = details


class RenderFailure(ShopError):
    """Document generation failed for one export format"""

    status_code = 500

    def __init__(self, message: str, export_format: Optional[str] = None):
        super().__init__(message)
        self.export_format = export_format


class ImageUploadError(ShopError):
    """The image host rejected or failed an upload"""

    status_code = 502
