# backend/stocktrail/core/errors.py

"""
Business-rule errors raised by the services.

Each carries the HTTP status it maps to; the API layer translates them in
one place (stocktrail.api.errors) so services never build responses.
"""


class InventoryError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Missing/blank field, bad stock value, unreadable CSV."""

    status_code = 400


class ConflictError(InventoryError):
    """Product name already taken by a different product."""

    status_code = 400


class NotFoundError(InventoryError):
    status_code = 404
