# sdk/errors.py
from typing import Optional


class InventoryError(Exception):
    """Base class for every error the SDK raises."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    # raised before any request is sent
    pass


class ImagePermissionError(InventoryError):
    pass


class ProductServiceError(InventoryError):
    """Transport failure or non-2xx response from the product service.

    status_code is None when no response was received at all.
    server_message is the ``error`` text from the response body, if any.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, server_message: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message
