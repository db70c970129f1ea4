"""
Tests for sheets.row_codec

Covers: encoding orders to rows, grouping rows back into orders,
newest-first presentation and the anomaly report.
"""
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(__file__))
from sheet_fakes import HEADER, order_row  # noqa: E402  (also puts src/ on the path)

from sheets.row_codec import (
    Order,
    OrderItem,
    decode_rows,
    encode_order,
    find_anomalies,
    format_order,
    present_orders,
)


def _order(order_no='105', items=(('Shirt', '2'), ('Cap', '1'))):
    return Order(
        order_no=order_no, date='05/03/2024', set_name='Set A', page_no='3',
        recipient_name='Somchai', address='1 Main Rd', phone='0812345678',
        courier='Kerry', items=[OrderItem(name, qty) for name, qty in items],
    )


class TestEncode(unittest.TestCase):

    def test_one_row_per_item_in_item_order(self):
        rows = encode_order(_order())
        self.assertEqual(len(rows), 2)
        self.assertEqual(
            rows[0],
            ['05/03/2024', '105', 'Set A', '3', 'Somchai', '1 Main Rd',
             '0812345678', 'Shirt', '2', 'Kerry'],
        )
        self.assertEqual(rows[1][7:9], ['Cap', '1'])
        self.assertEqual(rows[0][:7], rows[1][:7])

    def test_order_without_items_encodes_to_nothing(self):
        self.assertEqual(encode_order(_order(items=())), [])

    def test_format_order_formats_date_and_phone_only(self):
        order = _order()
        order.date = '2024-03-05'
        order.phone = '66812345678'
        formatted = format_order(order)
        self.assertEqual(formatted.date, "'05/03/2024")
        self.assertEqual(formatted.phone, "'0812345678")
        self.assertEqual(formatted.address, order.address)
        # Original left untouched
        self.assertEqual(order.date, '2024-03-05')


class TestDecode(unittest.TestCase):

    def test_round_trip(self):
        order = _order(items=(('Shirt', '2'), ('Cap', '1'), ('Bag', '5')))
        decoded = decode_rows([HEADER] + encode_order(order))
        self.assertEqual(decoded['105'], order)

    def test_groups_non_contiguous_rows(self):
        values = [HEADER,
                  order_row('104', 'A'),
                  order_row('105', 'B'),
                  order_row('104', 'C')]
        decoded = decode_rows(values)
        self.assertEqual(list(decoded), ['104', '105'])
        self.assertEqual([i.name for i in decoded['104'].items], ['A', 'C'])

    def test_rows_without_order_no_skipped(self):
        values = [HEADER, order_row('', 'Ghost'), order_row('7', 'Real'), []]
        decoded = decode_rows(values)
        self.assertEqual(list(decoded), ['7'])

    def test_first_seen_scalars_win(self):
        values = [HEADER,
                  order_row('9', 'A', recipient='First'),
                  order_row('9', 'B', recipient='Second')]
        order = decode_rows(values)['9']
        self.assertEqual(order.recipient_name, 'First')
        self.assertEqual([(i.name, i.qty) for i in order.items], [('A', '1'), ('B', '1')])

    def test_order_numbers_compared_as_text(self):
        values = [HEADER, order_row('123', 'A'), order_row('123.0', 'B')]
        decoded = decode_rows(values)
        self.assertEqual(set(decoded), {'123', '123.0'})

    def test_short_rows_padded(self):
        values = [HEADER, ['05/03/2024', '11', 'Set A']]
        order = decode_rows(values)['11']
        self.assertEqual(order.courier, '')
        self.assertEqual(order.items, [OrderItem('', '')])

    def test_header_only(self):
        self.assertEqual(decode_rows([HEADER]), {})


class TestPresent(unittest.TestCase):

    def test_reverse_first_seen_order(self):
        values = [HEADER, order_row('A'), order_row('B'), order_row('C')]
        presented = present_orders(decode_rows(values))
        self.assertEqual([o['orderNo'] for o in presented], ['C', 'B', 'A'])

    def test_wire_keys(self):
        presented = present_orders(decode_rows([HEADER, order_row('1', 'Shirt', '2')]))
        self.assertEqual(
            set(presented[0]),
            {'date', 'orderNo', 'setName', 'pageNo', 'recipientName',
             'address', 'phone', 'courier', 'items'},
        )
        self.assertEqual(presented[0]['items'], [{'name': 'Shirt', 'qty': '2'}])


class TestOrderFromDict(unittest.TestCase):

    def test_camel_case_wire_keys(self):
        order = Order.from_dict({
            'orderNo': 105, 'date': '2024-03-05', 'setName': 'S', 'pageNo': '2',
            'recipientName': 'Nok', 'address': 'Addr', 'phone': '081', 'courier': 'Flash',
            'items': [{'name': 'Shirt', 'qty': 3}],
        })
        self.assertEqual(order.order_no, '105')
        self.assertEqual(order.recipient_name, 'Nok')
        self.assertEqual(order.items, [OrderItem('Shirt', 3)])

    def test_snake_case_keys_and_missing_items(self):
        order = Order.from_dict({'order_no': 'X1', 'set_name': 'S'})
        self.assertEqual(order.set_name, 'S')
        self.assertEqual(order.items, [])

    def test_round_trip_through_wire_form(self):
        order = _order()
        self.assertEqual(Order.from_dict(order.to_dict()), order)


class TestFindAnomalies(unittest.TestCase):

    def test_clean_sheet(self):
        values = [HEADER, order_row('1', 'A'), order_row('1', 'B'), order_row('2')]
        self.assertEqual(find_anomalies(values), [])

    def test_divergent_scalar_fields_reported(self):
        values = [HEADER,
                  order_row('1', 'A'),
                  order_row('1', 'B', recipient='Other', courier='Flash')]
        anomalies = find_anomalies(values)
        self.assertEqual(anomalies, [{
            'type': 'divergent_fields',
            'order_no': '1',
            'row': 3,
            'fields': ['recipientName', 'courier'],
        }])

    def test_numeric_collision_reported(self):
        values = [HEADER, order_row('105'), order_row('105.0'), order_row('ABC')]
        anomalies = find_anomalies(values)
        self.assertEqual(anomalies, [{'type': 'numeric_collision', 'order_nos': ['105', '105.0']}])


if __name__ == "__main__":
    unittest.main()
