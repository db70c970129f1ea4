"""
Request handlers called by the front end.

Every handler returns an envelope ``{"success", "data", "message"}`` and
never raises; store errors become a localized message.
"""
from typing import Any, Dict

import config
from sheets.errors import OrderNotFoundError, StorageError, StoreBusyError
from sheets.order_store import OrderStore
from sheets.row_codec import Order
from utils.logger import get_logger


def _envelope(success: bool, data: Any = None, message: str = '') -> Dict[str, Any]:
    return {'success': success, 'data': data, 'message': message}


def _message(key: str, **kwargs) -> str:
    return config.MESSAGES[key].format(**kwargs)


def _failure_message(action: str, error: Exception) -> str:
    """Log a store failure and pick the message the user sees."""
    logger = get_logger()
    if isinstance(error, StoreBusyError):
        return _message('busy')
    if isinstance(error, OrderNotFoundError):
        logger.info(f"{action}: {error}", component="Handlers")
        return _message('not_found', order_no=error.order_no)
    if isinstance(error, StorageError):
        logger.error(f"{action}: {error}", component="Handlers")
    else:
        logger.error(f"{action}: unexpected {type(error).__name__}: {error}",
                     component="Handlers", exc_info=True)
    return _message('error', error=str(error))


def _as_order(order: Any) -> Order:
    return order if isinstance(order, Order) else Order.from_dict(order or {})


def invalid_request(errors: list) -> Dict[str, Any]:
    """Envelope for a request body that could not be parsed."""
    details = '; '.join(
        f"{'.'.join(str(part) for part in error.get('loc', ()) if part != 'body')}: {error.get('msg', '')}"
        for error in errors
    )
    get_logger().warning(f"Rejected request body: {details}", component="Handlers")
    return _envelope(False, None, _message('error', error=details))


def get_init_data(store: OrderStore) -> Dict[str, Any]:
    """Product and courier lists for the order form."""
    try:
        data = {
            'products': store.list_products(),
            'couriers': store.list_couriers(),
        }
        return _envelope(True, data, _message('init_loaded'))
    except Exception as e:
        return _envelope(False, None, _failure_message("getInitData", e))


def save_data(store: OrderStore, order: Any) -> Dict[str, Any]:
    """Append a new order."""
    try:
        store.append(_as_order(order))
        return _envelope(True, None, _message('save_success'))
    except Exception as e:
        return _envelope(False, None, _failure_message("saveData", e))


def update_order(store: OrderStore, old_order_no: str, order: Any) -> Dict[str, Any]:
    """Replace the rows of ``old_order_no`` with ``order``."""
    try:
        new_order = _as_order(order)
        store.update(old_order_no, new_order)
        return _envelope(True, None, _message('update_success', order_no=old_order_no))
    except Exception as e:
        return _envelope(False, None, _failure_message("updateOrder", e))


def delete_order(store: OrderStore, order_no: str) -> Dict[str, Any]:
    """Remove every row of an order; the message carries the row count."""
    try:
        count = store.delete(order_no)
        return _envelope(
            True,
            {'deleted': count},
            _message('delete_success', order_no=order_no, count=count),
        )
    except Exception as e:
        return _envelope(False, None, _failure_message("deleteOrder", e))


def get_order_data(store: OrderStore) -> Dict[str, Any]:
    """
    All orders, newest first.

    On failure ``data`` is an empty list rather than None; the order table
    in the front end iterates it unconditionally.
    """
    try:
        orders = store.list_orders()
        return _envelope(True, orders, _message('orders_loaded'))
    except Exception as e:
        return _envelope(False, [], _failure_message("getOrderData", e))
