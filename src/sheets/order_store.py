"""
Order Store

Row operations on the Orders tab. This class is the only code that
touches order rows; callers work with Order objects.

Writers (append, delete, update) run inside one write-lock acquisition
each, so an update's delete and re-insert are never interleaved with
another writer. Readers do not lock and may see a half-applied write.
"""
from contextlib import contextmanager
from typing import Any, Dict, List

import config
from sheets.errors import OrderNotFoundError, OrderStoreError, StorageError, StoreBusyError
from sheets.row_codec import (
    COL_ORDER_NO,
    ROW_WIDTH,
    Order,
    decode_rows,
    encode_order,
    format_order,
    present_orders,
)
from sheets.sheets_client import ensure_worksheet, get_column_letter, open_spreadsheet
from sheets.write_lock import WriteLock, get_default_lock
from utils.logger import get_logger


class OrderStore:
    """
    Append / find / delete / update / list over the Orders tab.

    Pass a spreadsheet (tests use an in-memory fake) to skip connecting
    to GOOGLE_SHEET_ID.
    """

    def __init__(self, spreadsheet: object = None, lock: WriteLock = None):
        if spreadsheet is None:
            spreadsheet = open_spreadsheet()
        self.spreadsheet = spreadsheet
        self.worksheet = ensure_worksheet(
            spreadsheet, config.ORDERS_SHEET_NAME, config.ORDER_COLUMNS
        )
        self.lock = lock or get_default_lock()
        self.logger = get_logger()

    # ─────────────────────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────────────────────

    @contextmanager
    def _storage(self, action: str):
        """Re-raise Sheets/transport failures as StorageError."""
        try:
            yield
        except OrderStoreError:
            raise
        except Exception as e:
            raise StorageError(f"{action} failed: {e}") from e

    @contextmanager
    def _critical_section(self, action: str):
        """Hold the write lock; the lock is released on every exit path."""
        try:
            with self.lock.hold(), self._storage(action):
                yield
        except StoreBusyError:
            self.logger.log_contention(action, self.lock.timeout)
            raise

    # ─────────────────────────────────────────────────────────────
    # Writers
    # ─────────────────────────────────────────────────────────────

    def append(self, order: Order) -> int:
        """
        Append the order's rows as one block at the bottom of the sheet.

        Returns:
            Number of rows written (0 for an order without items).
        """
        rows = encode_order(format_order(order))
        with self._critical_section("Append"):
            if rows:
                self.worksheet.append_rows(
                    rows,
                    value_input_option='USER_ENTERED',
                    insert_data_option='INSERT_ROWS',
                    table_range='A1',
                )
        self.logger.log_rows_written("appended", order.order_no, len(rows))
        return len(rows)

    def delete(self, order_no: str) -> int:
        """
        Delete every row of an order, bottom row first.

        Returns:
            Number of rows deleted.

        Raises:
            OrderNotFoundError: no row carries ``order_no``.
        """
        with self._critical_section("Delete"):
            indices = self.find_row_indices(order_no)
            if not indices:
                raise OrderNotFoundError(str(order_no))
            for row_num in indices:
                self.worksheet.delete_rows(row_num)
        self.logger.log_rows_written("deleted", order_no, len(indices))
        return len(indices)

    def update(self, old_order_no: str, order: Order) -> int:
        """
        Replace an order's rows with the rows of ``order``.

        The old rows are deleted and the new ones are inserted where the
        topmost old row was, so the item count may change. Both steps run
        under one lock acquisition.

        Returns:
            Number of rows written.

        Raises:
            OrderNotFoundError: no row carries ``old_order_no``; nothing is changed.
        """
        rows = encode_order(format_order(order))
        with self._critical_section("Update"):
            indices = self.find_row_indices(old_order_no)
            if not indices:
                raise OrderNotFoundError(str(old_order_no))

            # Rows are deleted bottom-up, so the topmost position never shifts
            insert_pos = indices[-1]
            for row_num in indices:
                self.worksheet.delete_rows(row_num)

            if rows:
                self.worksheet.insert_rows(
                    [[''] * ROW_WIDTH for _ in rows], row=insert_pos
                )
                end_row = insert_pos + len(rows) - 1
                self.worksheet.update(
                    values=rows,
                    range_name=f"A{insert_pos}:{get_column_letter(ROW_WIDTH)}{end_row}",
                    value_input_option='USER_ENTERED',
                )
        self.logger.log_rows_written(
            f"replaced {old_order_no} ({len(indices)} old row(s))", order.order_no, len(rows)
        )
        return len(rows)

    # ─────────────────────────────────────────────────────────────
    # Readers
    # ─────────────────────────────────────────────────────────────

    def find_row_indices(self, order_no: str) -> List[int]:
        """
        1-based row numbers whose OrderNo equals ``order_no`` as text,
        highest first. The header row is never matched.
        """
        target = str(order_no)
        if not target:
            return []
        with self._storage("Find"):
            column = self.worksheet.col_values(COL_ORDER_NO + 1)
        return [
            row_num
            for row_num in range(len(column), 1, -1)
            if str(column[row_num - 1]) == target
        ]

    def list_orders(self) -> List[Dict[str, Any]]:
        """All orders in wire form, newest (last first-seen) first."""
        with self._storage("List orders"):
            # Formatted values, so text-forced dates and phones read as written
            values = self.worksheet.get_all_values()
        return present_orders(decode_rows(values))

    def list_column(self, sheet_name: str, column: int) -> List[str]:
        """Trimmed non-empty values of one column of a tab, from row 2 down."""
        with self._storage(f"Read {sheet_name}"):
            values = self.spreadsheet.worksheet(sheet_name).col_values(column)
        cleaned = [str(value).strip() for value in values[1:]]
        return [value for value in cleaned if value]

    def list_products(self) -> List[str]:
        return self.list_column(config.PRODUCTS_SHEET_NAME, config.PRODUCTS_COLUMN)

    def list_couriers(self) -> List[str]:
        return self.list_column(config.COURIERS_SHEET_NAME, config.COURIERS_COLUMN)
