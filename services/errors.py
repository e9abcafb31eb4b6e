class ProductError(Exception):
    """Base error for the product service, rendered as {"message": ...}."""

    status_code = 500
    message = "Internal error"

    def __init__(self, message=None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationError(ProductError):
    status_code = 400
    message = "All fields are required"


class NotFoundError(ProductError):
    status_code = 404
    message = "Product not found"


class StorageError(ProductError):
    status_code = 500
    message = "Product storage unavailable"
