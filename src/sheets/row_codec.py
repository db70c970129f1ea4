"""
Order <-> row transcoding for the Orders sheet.

An order is never stored as one record. Each line item is one row that
repeats the order's scalar fields:

    A Date | B OrderNo | C SetName | D PageNo | E RecipientName |
    F Address | G Phone | H ItemName | I ItemQty | J Courier

Reading groups rows back by OrderNo (compared as text, so "123" and
"123.0" are different orders). When rows of the same order disagree on a
scalar field the first row read wins; find_anomalies() reports those
cases instead of repairing them.

Pure definitions -- no side effects, no imports of external services.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

from utils.formatters import format_date, format_phone

# 0-based column positions
COL_DATE = 0
COL_ORDER_NO = 1
COL_SET_NAME = 2
COL_PAGE_NO = 3
COL_RECIPIENT_NAME = 4
COL_ADDRESS = 5
COL_PHONE = 6
COL_ITEM_NAME = 7
COL_ITEM_QTY = 8
COL_COURIER = 9
ROW_WIDTH = 10

# (attribute, wire key, column) for the per-order fields
SCALAR_FIELDS = [
    ('date', 'date', COL_DATE),
    ('order_no', 'orderNo', COL_ORDER_NO),
    ('set_name', 'setName', COL_SET_NAME),
    ('page_no', 'pageNo', COL_PAGE_NO),
    ('recipient_name', 'recipientName', COL_RECIPIENT_NAME),
    ('address', 'address', COL_ADDRESS),
    ('phone', 'phone', COL_PHONE),
    ('courier', 'courier', COL_COURIER),
]


@dataclass
class OrderItem:
    """One line item: a product name and its quantity."""
    name: str = ''
    qty: Any = ''

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'qty': self.qty}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItem':
        return cls(name=data.get('name', ''), qty=data.get('qty', ''))


@dataclass
class Order:
    """An order and its line items, as the front end sees it."""
    order_no: str = ''
    date: str = ''
    set_name: str = ''
    page_no: str = ''
    recipient_name: str = ''
    address: str = ''
    phone: str = ''
    courier: str = ''
    items: List[OrderItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form (camelCase keys)."""
        data = {wire: getattr(self, attr) for attr, wire, _ in SCALAR_FIELDS}
        data['items'] = [item.to_dict() for item in self.items]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        """Build an order from wire (camelCase) or attribute (snake_case) keys."""
        kwargs = {}
        for attr, wire, _ in SCALAR_FIELDS:
            value = data.get(wire, data.get(attr, ''))
            kwargs[attr] = '' if value is None else value
        kwargs['order_no'] = str(kwargs['order_no'])
        items = []
        for item in data.get('items') or []:
            items.append(item if isinstance(item, OrderItem) else OrderItem.from_dict(item))
        return cls(items=items, **kwargs)

    @classmethod
    def from_row(cls, row: List[Any]) -> 'Order':
        """Scalar fields of a sheet row; items start empty."""
        row = _pad(row)
        kwargs = {attr: row[col] for attr, _, col in SCALAR_FIELDS}
        kwargs['order_no'] = str(kwargs['order_no'])
        return cls(**kwargs)


def _pad(row: List[Any]) -> List[Any]:
    """get_all_values() trims trailing empty cells; restore the full width."""
    if len(row) >= ROW_WIDTH:
        return row
    return list(row) + [''] * (ROW_WIDTH - len(row))


def format_order(order: Order) -> Order:
    """Copy of ``order`` with date and phone made storage-safe."""
    return replace(
        order,
        date=format_date(order.date),
        phone=format_phone(order.phone),
        items=list(order.items),
    )


def encode_order(order: Order) -> List[List[Any]]:
    """One row per item, in item order. An order without items yields []."""
    rows = []
    for item in order.items:
        row = [''] * ROW_WIDTH
        for attr, _, col in SCALAR_FIELDS:
            row[col] = getattr(order, attr)
        row[COL_ITEM_NAME] = item.name
        row[COL_ITEM_QTY] = item.qty
        rows.append(row)
    return rows


def decode_rows(values: List[List[Any]]) -> Dict[str, Order]:
    """
    Group a sheet (header row included) into orders keyed by OrderNo.

    Rows without an OrderNo are skipped. Keys keep the order in which each
    OrderNo was first seen.
    """
    orders: Dict[str, Order] = {}
    for row in values[1:]:
        row = _pad(row)
        if not row[COL_ORDER_NO]:
            continue
        key = str(row[COL_ORDER_NO])
        order = orders.get(key)
        if order is None:
            order = Order.from_row(row)
            orders[key] = order
        order.items.append(OrderItem(name=row[COL_ITEM_NAME], qty=row[COL_ITEM_QTY]))
    return orders


def present_orders(orders: Dict[str, Order]) -> List[Dict[str, Any]]:
    """
    Wire-form orders, last first-seen first.

    Appends go to the bottom of the sheet, so this is roughly newest-first.
    An updated order keeps its old position and is not moved to the top.
    """
    return [order.to_dict() for order in reversed(list(orders.values()))]


def find_anomalies(values: List[List[Any]]) -> List[Dict[str, Any]]:
    """
    Report data-quality problems without touching the data.

    - ``divergent_fields``: a later row of an order disagrees with the first
      row on some scalar field (the first row is what readers see).
    - ``numeric_collision``: distinct OrderNo values that are equal as
      numbers, e.g. "105" and "105.0". They are different orders to the store.
    """
    anomalies = []
    first_rows: Dict[str, List[Any]] = {}

    for row_num, row in enumerate(values[1:], start=2):
        row = _pad(row)
        if not row[COL_ORDER_NO]:
            continue
        key = str(row[COL_ORDER_NO])
        first = first_rows.get(key)
        if first is None:
            first_rows[key] = row
            continue
        diverging = [wire for _, wire, col in SCALAR_FIELDS if row[col] != first[col]]
        if diverging:
            anomalies.append({
                'type': 'divergent_fields',
                'order_no': key,
                'row': row_num,
                'fields': diverging,
            })

    by_number: Dict[float, List[str]] = {}
    for key in first_rows:
        try:
            number = float(key)
        except ValueError:
            continue
        by_number.setdefault(number, []).append(key)
    for keys in by_number.values():
        if len(keys) > 1:
            anomalies.append({'type': 'numeric_collision', 'order_nos': keys})

    return anomalies
