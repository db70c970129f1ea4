"""
In-memory stand-ins for gspread Spreadsheet/Worksheet objects.

Only the calls the order store makes are implemented. Values written with
value_input_option='USER_ENTERED' lose a leading apostrophe, the way Google
Sheets stores text-forced input; everything reads back as a string.
"""
import os
import re
import sys
import tempfile

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_DIR = os.path.join(PROJECT_ROOT, 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

# Keep test log files out of the project tree
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='order_tracker_test_logs_'))

import gspread

HEADER = ['Date', 'OrderNo', 'SetName', 'PageNo', 'RecipientName',
          'Address', 'Phone', 'ItemName', 'ItemQty', 'Courier']

_RANGE_START = re.compile(r'^([A-Z]+)(\d+)')


def _stored(value, value_input_option):
    text = '' if value is None else str(value)
    if value_input_option == 'USER_ENTERED' and text.startswith("'"):
        return text[1:]
    return text


class FakeWorksheet:
    def __init__(self, title, rows=None):
        self.title = title
        self.rows = [list(r) for r in rows or []]
        self.mutations = []
        self.fail_on = set()

    def _mutate(self, name, *args):
        if name in self.fail_on:
            raise ConnectionError(f"{name} failed: quota exceeded")
        self.mutations.append((name,) + args)

    # Reads

    def row_values(self, idx):
        if 1 <= idx <= len(self.rows):
            return list(self.rows[idx - 1])
        return []

    def get_all_values(self):
        if 'get_all_values' in self.fail_on:
            raise ConnectionError("read failed")
        return [list(r) for r in self.rows]

    def col_values(self, col):
        values = [r[col - 1] if len(r) >= col else '' for r in self.rows]
        while values and values[-1] == '':
            values.pop()
        return values

    # Writes

    def append_row(self, values, value_input_option=None, **kwargs):
        self._mutate('append_row', len(self.rows) + 1)
        self.rows.append([_stored(v, value_input_option) for v in values])

    def append_rows(self, values, value_input_option=None, **kwargs):
        self._mutate('append_rows', len(values))
        for row in values:
            self.rows.append([_stored(v, value_input_option) for v in row])

    def delete_rows(self, start_index, end_index=None):
        self._mutate('delete_rows', start_index)
        end_index = end_index or start_index
        del self.rows[start_index - 1:end_index]

    def insert_rows(self, values, row=1, value_input_option=None, **kwargs):
        self._mutate('insert_rows', row, len(values))
        for offset, new_row in enumerate(values):
            self.rows.insert(row - 1 + offset,
                             [_stored(v, value_input_option) for v in new_row])

    def update(self, values=None, range_name=None, value_input_option=None, **kwargs):
        self._mutate('update', range_name)
        letters, start_row = _RANGE_START.match(range_name).groups()
        start_col = 0
        for ch in letters:
            start_col = start_col * 26 + (ord(ch) - 64)
        for r_offset, new_row in enumerate(values):
            row_idx = int(start_row) - 1 + r_offset
            while len(self.rows) <= row_idx:
                self.rows.append([])
            target = self.rows[row_idx]
            for c_offset, value in enumerate(new_row):
                col_idx = start_col - 1 + c_offset
                while len(target) <= col_idx:
                    target.append('')
                target[col_idx] = _stored(value, value_input_option)


class FakeSpreadsheet:
    def __init__(self, sheets=None):
        self.sheets = dict(sheets or {})

    def worksheet(self, title):
        if title not in self.sheets:
            raise gspread.exceptions.WorksheetNotFound(title)
        return self.sheets[title]

    def add_worksheet(self, title, rows, cols):
        ws = FakeWorksheet(title)
        self.sheets[title] = ws
        return ws


def order_row(order_no, item='Item', qty='1', recipient='Somchai', date='05/03/2024',
              phone='0812345678', courier='Kerry'):
    """A stored Orders row (already text-forced values, as Sheets shows them)."""
    return [date, order_no, 'Set A', '1', recipient, '1 Main Rd', phone, item, qty, courier]


def make_spreadsheet(order_rows=None, products=None, couriers=None):
    """Workbook with Orders, Products (column B) and Couriers (column A) tabs."""
    orders = FakeWorksheet('Orders', [HEADER] + [list(r) for r in order_rows or []])
    product_ws = FakeWorksheet(
        'Products', [['Code', 'Product']] + [[f'P{i}', p] for i, p in enumerate(products or [])]
    )
    courier_ws = FakeWorksheet('Couriers', [['Courier']] + [[c] for c in couriers or []])
    return FakeSpreadsheet({'Orders': orders, 'Products': product_ws, 'Couriers': courier_ws})
