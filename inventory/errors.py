# inventory/errors.py


class InventoryError(Exception):
    """Base class for errors raised by the store and the product handlers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    status_code = 400


class NotFound(InventoryError):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class StorageError(InventoryError):
    status_code = 500
