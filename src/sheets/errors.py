"""
Exceptions raised by the order store.

Handlers in api/handlers.py turn every one of these into an envelope
message; none of them is meant to reach an HTTP client as an exception.
"""


class OrderStoreError(Exception):
    """Base class for order store failures."""


class StoreBusyError(OrderStoreError):
    """The write lock was not acquired in time. Nothing was written."""

    def __init__(self, timeout: float):
        super().__init__(f"Write lock not acquired within {timeout:g}s")
        self.timeout = timeout


class OrderNotFoundError(OrderStoreError):
    """No rows carry the requested order number."""

    def __init__(self, order_no: str):
        super().__init__(f"Order not found: {order_no}")
        self.order_no = order_no


class StorageError(OrderStoreError):
    """A Google Sheets read or write failed."""
