class StorefrontError(Exception):
    """Base class for domain failures that map to a fixed HTTP status and message."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError):
    status_code = 404


class InsufficientStockError(StorefrontError):
    status_code = 400
