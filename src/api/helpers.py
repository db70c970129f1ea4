"""
API helper functions shared across route modules.
Provides the shared OrderStore dependency.
"""
from fastapi import Request

from sheets.order_store import OrderStore


def get_order_store(request: Request) -> OrderStore:
    """
    Return the OrderStore attached to the app.

    The store is built once in the app lifespan (or injected by
    ``create_app(order_store=...)``) so every request shares the same
    worksheet handle and write lock.
    """
    return request.app.state.order_store
