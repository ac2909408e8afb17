# domain/errors.py
from typing import Optional


class InventoryApiError(Exception):
    """
    The inventory API could not be reached or answered with a non-2xx status.
    `message` carries the server's `error` text when the body had one.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(InventoryApiError):
    pass


class ValidationFailure(Exception):
    pass
