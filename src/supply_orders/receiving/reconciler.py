"""
Receiving Reconciler

Matches deliveries against the ledger. Staff find an order by scanning its
QR code or searching, then mark all or some of its pending lines received.
The pending view is re-read from the ledger after every receive so it never
shows lines that were just received.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from supply_orders.models import ReceiveResult, RowStatus, SheetResult
from supply_orders.orders.qr_code import parse_scanned_text
from supply_orders.orders.status import group_rows, matches_search, rows_for_order
from supply_orders.utils.logger import get_logger


class ReceivingReconciler:
    """Pending view, scan lookup and receive actions over an order ledger."""

    def __init__(self, ledger):
        self.ledger = ledger

    def pending_orders(self, term: Optional[str] = None) -> SheetResult:
        """
        Pending rows grouped by order id. ``data`` is a List[LedgerGroup].

        The search covers order id, supplier and orderer; product names are
        not searched here.
        """
        result = self.ledger.fetch_rows()
        if not result.success:
            return result
        rows = [row for row in result.data if row.status == RowStatus.PENDING]
        if term:
            rows = [row for row in rows if matches_search(row, term, include_product=False)]
        return SheetResult(True, data=group_rows(rows))

    def lookup_scanned(self, code: str) -> SheetResult:
        """
        Resolve scanner input to pending orders.

        A QR payload resolves by its exact order id only: 'not_found' when
        no row has it, 'nothing_changed' when every row is already
        received. Typed text tries the exact id first and then falls back
        to the pending search.
        """
        term, is_payload = parse_scanned_text(code)
        if not term:
            return SheetResult(False, message="Nothing was scanned", error_type='validation')

        result = self.ledger.fetch_rows()
        if not result.success:
            return result

        rows = rows_for_order(result.data, term)
        pending = [row for row in rows if row.status == RowStatus.PENDING]
        if pending:
            return SheetResult(True, data=group_rows(pending))
        if not is_payload:
            return self.pending_orders(term)

        if not rows:
            return SheetResult(False, data=[], message=f"Order {term} not found",
                               error_type='not_found')
        return SheetResult(False, data=[], message=f"Order {term} is already fully received",
                           error_type='nothing_changed')

    def receive(self, order_id: str, product_names: Optional[Sequence[str]] = None,
                when: Optional[datetime] = None) -> ReceiveResult:
        """Mark an order's pending rows (or the named subset) as received."""
        order_id = (order_id or '').strip()
        if not order_id:
            return ReceiveResult(False, order_id, message="Order ID is required",
                                 error_type='validation')

        result = self.ledger.receive(order_id, product_names, when=when)
        if not result.success:
            get_logger().warning(
                f"Receive {order_id}: {result.error_type} - {result.message}",
                component="Receiving",
            )
        return result

    def receive_and_refresh(self, order_id: str, product_names: Optional[Sequence[str]] = None,
                            term: Optional[str] = None, when: Optional[datetime] = None):
        """Receive, then re-read the pending view. Returns (ReceiveResult, SheetResult)."""
        outcome = self.receive(order_id, product_names, when=when)
        return outcome, self.pending_orders(term)
