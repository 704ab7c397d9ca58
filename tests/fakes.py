"""
In-memory stand-ins for gspread objects and the order services.

No real Google Sheets or network calls are made anywhere in the tests.
"""
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT / 'src') not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT / 'src'))

import gspread

from supply_orders import config
from supply_orders.models import CartLine, Employee, Product


class FakeWorksheet:
    def __init__(self, title, rows=None):
        self.title = title
        self.rows = [list(r) for r in (rows or [])]
        self.fail_reads = False
        # Raise on the Nth append_row / update_cell call (1-based); None = never
        self.fail_on_append = None
        self.fail_on_update = None
        self.append_calls = 0
        self.update_calls = 0

    def row_values(self, idx):
        if 1 <= idx <= len(self.rows):
            return self.rows[idx - 1]
        return []

    def get_all_values(self):
        if self.fail_reads:
            raise ConnectionError("sheet read failed")
        return [list(r) for r in self.rows]

    def append_row(self, values, value_input_option=None):
        self.append_calls += 1
        if self.fail_on_append is not None and self.append_calls >= self.fail_on_append:
            raise ConnectionError("append failed")
        self.rows.append([str(v) for v in values])

    def update_cell(self, row, col, value):
        self.update_calls += 1
        if self.fail_on_update is not None and self.update_calls >= self.fail_on_update:
            raise ConnectionError("update failed")
        while len(self.rows) < row:
            self.rows.append([])
        target = self.rows[row - 1]
        while len(target) < col:
            target.append("")
        target[col - 1] = str(value)


class FakeSpreadsheet:
    def __init__(self):
        self.sheets = {}

    def worksheet(self, title):
        if title not in self.sheets:
            raise gspread.exceptions.WorksheetNotFound(title)
        return self.sheets[title]

    def add_worksheet(self, title, rows, cols):
        ws = FakeWorksheet(title)
        self.sheets[title] = ws
        return ws

    def add_sheet(self, title, rows):
        ws = FakeWorksheet(title, rows)
        self.sheets[title] = ws
        return ws


def ledger_row(order_id, product, status="Pending", quantity=1, supplier="X",
               orderer="E001 Tanaka", date="2025-01-10 09:00:00"):
    """One Orders-tab row in ORDERS_COLUMNS order."""
    received_qty = str(quantity) if status == "Received" else ""
    received_date = "2025-01-11 10:00:00" if status == "Received" else ""
    return [order_id, date, orderer, supplier, product, str(quantity), "pcs",
            "FALSE", status, received_qty, received_date]


def ledger_spreadsheet(rows):
    fake = FakeSpreadsheet()
    fake.add_sheet(config.ORDERS_SHEET_NAME, [list(config.ORDERS_COLUMNS)] + [list(r) for r in rows])
    return fake


def make_product(product_id="1", name="Gloves", price=100.0, supplier="X", unit="pcs"):
    return Product(id=product_id, name=name, category="Safety", price=price,
                   unit=unit, supplier=supplier)


def make_line(product_id="1", price=100.0, quantity=1, supplier="X", name=None, urgent=False):
    product = make_product(product_id, name or f"Item {product_id}", price, supplier)
    return CartLine(product=product, quantity=quantity, urgent=urgent)


def make_employee(code="E001", name="Tanaka", factory="Koga"):
    return Employee(code=code, name=name, factory=factory)


class RecordingNotifier:
    """Notifier double that records calls and returns a fixed outcome."""

    def __init__(self, outcome=True, raises=None):
        self.outcome = outcome
        self.raises = raises
        self.calls = []

    def notify_order(self, group, requester, pdf_path=None):
        self.calls.append((group.order_id, pdf_path))
        if self.raises:
            raise self.raises
        return self.outcome


def temp_output_dir(name):
    path = os.path.join(str(PROJECT_ROOT), "temp", name)
    os.makedirs(path, exist_ok=True)
    return path
