"""
Order routes - init data, list, create, update and delete orders.
Every route answers 200 with the handler envelope; failures are reported
in ``success``/``message`` rather than as HTTP errors.

Routes are plain ``def`` so the blocking Sheets calls and the write lock
wait run in FastAPI's threadpool instead of the event loop.
"""
from typing import Any, List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from api import handlers
from api.helpers import get_order_store
from sheets.order_store import OrderStore
from sheets.row_codec import Order

router = APIRouter()

# ── Pydantic models ──────────────────────────────────────────────

class OrderItemBody(BaseModel):
    """One line item as sent by the order form."""
    name: str = ''
    qty: Union[int, float, str] = ''


class OrderBody(BaseModel):
    """Order as sent by the order form (camelCase keys)."""
    model_config = ConfigDict(populate_by_name=True)

    order_no: Union[str, int, float] = Field('', alias='orderNo')
    date: str = ''
    set_name: str = Field('', alias='setName')
    page_no: Union[str, int, float] = Field('', alias='pageNo')
    recipient_name: str = Field('', alias='recipientName')
    address: str = ''
    phone: Union[str, int] = ''
    courier: str = ''
    items: List[OrderItemBody] = []

    def to_order(self) -> Order:
        return Order.from_dict(self.model_dump())


class Envelope(BaseModel):
    """Uniform handler response."""
    success: bool
    data: Optional[Any] = None
    message: str = ''


# ── Routes ────────────────────────────────────────────────────────

@router.get(
    "/init-data",
    response_model=Envelope,
    summary="Product and courier lists",
)
def get_init_data(store: OrderStore = Depends(get_order_store)):
    """Reference lists used to fill the order form's dropdowns."""
    return handlers.get_init_data(store)


@router.get(
    "/orders",
    response_model=Envelope,
    summary="List orders, newest first",
)
def get_order_data(store: OrderStore = Depends(get_order_store)):
    """On failure ``data`` is an empty list."""
    return handlers.get_order_data(store)


@router.post(
    "/orders",
    response_model=Envelope,
    summary="Save a new order",
)
def save_data(body: OrderBody, store: OrderStore = Depends(get_order_store)):
    return handlers.save_data(store, body.to_order())


@router.put(
    "/orders/{old_order_no}",
    response_model=Envelope,
    summary="Replace an existing order",
)
def update_order(
    old_order_no: str,
    body: OrderBody,
    store: OrderStore = Depends(get_order_store),
):
    """
    Replace every row of ``old_order_no`` with the rows of the body.

    The body may carry a different order number and a different number
    of items.
    """
    return handlers.update_order(store, old_order_no, body.to_order())


@router.delete(
    "/orders/{order_no}",
    response_model=Envelope,
    summary="Delete an order",
)
def delete_order(order_no: str, store: OrderStore = Depends(get_order_store)):
    return handlers.delete_order(store, order_no)
