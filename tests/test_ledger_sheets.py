"""
Order ledger – Google Sheets tests (mocked)
===========================================

These tests verify that:
- Appended rows have the ledger shape and start Pending.
- Receive flips only Pending (and selected) rows and reports distinct
  outcomes for unknown ids, nothing to change and transport failures.
- Failures never raise; they come back as tagged results.
"""
import unittest
from datetime import datetime

from fakes import FakeSpreadsheet, ledger_row, ledger_spreadsheet, make_employee, make_line

from supply_orders import config
from supply_orders.models import AggregateStatus, OrderGroup, RowStatus
from supply_orders.orders.status import derive_status
from supply_orders.sheets.ledger_sheets import OrderLedgerSheets


def _group(order_id="ORD-1-1"):
    lines = [make_line("1", price=100, quantity=2, name="Gloves", urgent=True),
             make_line("2", price=10, quantity=3, name="Tape")]
    return OrderGroup(order_id=order_id, supplier="X", lines=lines, subtotal=230)


class TestAppend(unittest.TestCase):
    def test_creates_tab_with_header_and_appends_pending_rows(self):
        fake = FakeSpreadsheet()
        ledger = OrderLedgerSheets.from_spreadsheet(fake)

        result = ledger.append_order_group(_group(), make_employee(), datetime(2025, 1, 10, 9, 0, 0))

        self.assertTrue(result.success)
        self.assertEqual(result.data, 2)
        ws = fake.sheets[config.ORDERS_SHEET_NAME]
        self.assertEqual(ws.rows[0], config.ORDERS_COLUMNS)
        self.assertEqual(ws.rows[1], [
            "ORD-1-1", "2025-01-10 09:00:00", "E001 Tanaka", "X", "Gloves",
            "2", "pcs", "TRUE", "Pending", "", "",
        ])
        self.assertEqual(ws.rows[2][4], "Tape")

    def test_partial_append_reports_rows_written(self):
        fake = ledger_spreadsheet([])
        fake.sheets[config.ORDERS_SHEET_NAME].fail_on_append = 2
        ledger = OrderLedgerSheets.from_spreadsheet(fake)

        result = ledger.append_order_group(_group(), make_employee())

        self.assertFalse(result.success)
        self.assertEqual(result.error_type, "transport")
        self.assertEqual(result.data, 1)
        self.assertEqual(len(fake.sheets[config.ORDERS_SHEET_NAME].rows), 2)

    def test_fetch_rows_round_trip(self):
        fake = FakeSpreadsheet()
        ledger = OrderLedgerSheets.from_spreadsheet(fake)
        ledger.append_order_group(_group(), make_employee())

        rows = ledger.fetch_rows().data
        self.assertEqual([r.product_name for r in rows], ["Gloves", "Tape"])
        self.assertTrue(rows[0].urgent)
        self.assertEqual(rows[1].quantity, 3)
        self.assertEqual(rows[0].row_number, 2)
        self.assertEqual(derive_status(rows), AggregateStatus.PENDING)


class TestReceive(unittest.TestCase):
    def setUp(self):
        self.fake = ledger_spreadsheet([
            ledger_row("ORD-1-1", "Gloves", quantity=2),
            ledger_row("ORD-1-1", "Tape", quantity=3),
            ledger_row("ORD-1-2", "Mask", supplier="Y"),
        ])
        self.ws = self.fake.sheets[config.ORDERS_SHEET_NAME]
        self.ledger = OrderLedgerSheets.from_spreadsheet(self.fake)
        self.when = datetime(2025, 1, 12, 15, 30, 0)

    def _statuses(self, order_id):
        return [r.status for r in self.ledger.fetch_order(order_id).data]

    def test_receive_all(self):
        result = self.ledger.receive("ORD-1-1", when=self.when)

        self.assertTrue(result.success)
        self.assertEqual(result.changed, 2)
        self.assertEqual(self._statuses("ORD-1-1"), [RowStatus.RECEIVED] * 2)
        self.assertEqual(self.ws.rows[1][8:], ["Received", "2", "2025-01-12 15:30:00"])
        self.assertEqual(self.ws.rows[2][9], "3")
        # other orders untouched
        self.assertEqual(self._statuses("ORD-1-2"), [RowStatus.PENDING])

    def test_restricted_receive_gives_partial(self):
        result = self.ledger.receive("ORD-1-1", ["Tape"], when=self.when)

        self.assertTrue(result.success)
        self.assertEqual(result.changed, 1)
        rows = self.ledger.fetch_order("ORD-1-1").data
        self.assertEqual(derive_status(rows), AggregateStatus.PARTIAL)
        self.assertEqual(rows[0].status, RowStatus.PENDING)

    def test_receive_on_received_order_changes_nothing(self):
        self.ledger.receive("ORD-1-1", when=self.when)
        before = [list(r) for r in self.ws.rows]

        result = self.ledger.receive("ORD-1-1")

        self.assertFalse(result.success)
        self.assertTrue(result.found)
        self.assertEqual(result.error_type, "nothing_changed")
        self.assertEqual(result.changed, 0)
        self.assertEqual(self.ws.rows, before)

    def test_empty_selection_changes_nothing(self):
        result = self.ledger.receive("ORD-1-1", [])
        self.assertEqual(result.error_type, "nothing_changed")

    def test_unknown_order(self):
        result = self.ledger.receive("ORD-404")
        self.assertFalse(result.success)
        self.assertFalse(result.found)
        self.assertEqual(result.error_type, "not_found")

    def test_order_id_match_is_exact(self):
        result = self.ledger.receive("ORD-1")
        self.assertEqual(result.error_type, "not_found")

    def test_read_failure_is_transport(self):
        self.ws.fail_reads = True
        result = self.ledger.receive("ORD-1-1")
        self.assertEqual(result.error_type, "transport")

    def test_update_failure_is_transport(self):
        self.ws.fail_on_update = 1
        result = self.ledger.receive("ORD-1-1")
        self.assertFalse(result.success)
        self.assertEqual(result.error_type, "transport")
        self.assertEqual(result.changed, 0)

    def test_headers_resolved_by_alias(self):
        self.ws.rows[0] = [" orderid ", "Date", "Orderer", "Supplier", "ProductName",
                           "Quantity", "Unit", "Urgent", "STATUS", "ReceivedQty", "ReceivedDate"]
        result = self.ledger.receive("ORD-1-2", when=self.when)
        self.assertTrue(result.success)
        self.assertEqual(self.ws.rows[3][8], "Received")


if __name__ == "__main__":
    unittest.main()
