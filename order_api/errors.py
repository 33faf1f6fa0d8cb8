# errors.py

from enum import Enum


class ErrorKind(str, Enum):
    """ Business rule violations raised by the services. """
    CUSTOMER_NOT_FOUND = "customer_not_found"
    PRODUCTS_NOT_FOUND = "products_not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_QUANTITY = "invalid_quantity"
    EMAIL_IN_USE = "email_in_use"
    PRODUCT_EXISTS = "product_exists"
    ORDER_NOT_FOUND = "order_not_found"


class AppError(Exception):
    """
    Error raised by a service when a request breaks a business rule.

    Carries a kind and a human readable message. Translating the kind into a
    transport status code is left to the HTTP layer.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self):
        return f"AppError({self.kind.value!r}, {self.message!r})"
