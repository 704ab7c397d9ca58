"""
Order Ledger – Google Sheets
============================

The Orders tab is the order ledger: one row per ordered product line.

    OrderId | Date | Orderer | Supplier | ProductName | Quantity | Unit |
    Urgent | Status | ReceivedQty | ReceivedDate

Guardrails:
- Rows are appended one at a time; a failure mid-group leaves the rows
  already written in place and is reported, not rolled back.
- Receiving rewrites Status / ReceivedQty / ReceivedDate cells in place,
  row by row. There is no locking; two receivers racing on the same rows
  both end at Received.
- Every public method returns a tagged result instead of raising.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from supply_orders import config
from supply_orders.models import (
    Employee,
    LedgerRow,
    OrderGroup,
    ReceiveResult,
    RowStatus,
    SheetResult,
)
from supply_orders.orders.status import rows_for_order
from supply_orders.sheets.client import WorkbookTabs
from supply_orders.utils.header_lookup import find_column, get_value, rows_to_records
from supply_orders.utils.logger import get_logger

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

_TRUE_VALUES = {'true', '1', 'yes', 'y', config.URGENT_MARKER}


def _to_int(value) -> int:
    try:
        return int(float(str(value).replace(',', '').strip()))
    except (TypeError, ValueError):
        return 0


def _to_status(value) -> RowStatus:
    if str(value).strip().lower() == RowStatus.RECEIVED.value.lower():
        return RowStatus.RECEIVED
    return RowStatus.PENDING


def parse_ledger_record(record: Dict, row_number: int = 0) -> LedgerRow:
    """Build a LedgerRow from one header-keyed Orders record."""
    aliases = config.LEDGER_FIELD_ALIASES
    return LedgerRow(
        order_id=str(get_value(record, aliases['order_id'], '')).strip(),
        date=str(get_value(record, aliases['date'], '')),
        orderer=str(get_value(record, aliases['orderer'], '')),
        supplier=str(get_value(record, aliases['supplier'], '')),
        product_name=str(get_value(record, aliases['product_name'], '')),
        quantity=_to_int(get_value(record, aliases['quantity'], 0)),
        unit=str(get_value(record, aliases['unit'], '')),
        urgent=str(get_value(record, aliases['urgent'], '')).strip().lower() in _TRUE_VALUES,
        status=_to_status(get_value(record, aliases['status'], '')),
        received_qty=str(get_value(record, aliases['received_qty'], '')),
        received_date=str(get_value(record, aliases['received_date'], '')),
        row_number=row_number,
    )


def build_ledger_rows(group: OrderGroup, requester: Employee,
                      when: Optional[datetime] = None) -> List[LedgerRow]:
    """The Pending rows a freshly submitted order group appends."""
    when = when or datetime.now()
    timestamp = when.strftime(TIMESTAMP_FORMAT)
    return [
        LedgerRow(
            order_id=group.order_id,
            date=timestamp,
            orderer=requester.label,
            supplier=group.supplier,
            product_name=line.product.name,
            quantity=line.quantity,
            unit=line.product.unit,
            urgent=line.urgent,
            status=RowStatus.PENDING,
        )
        for line in group.lines
    ]


class OrderLedgerSheets(WorkbookTabs):
    """Read, append and receive against the Orders tab."""

    def _ledger(self):
        return self.get_or_create_sheet(config.ORDERS_SHEET_NAME, config.ORDERS_COLUMNS)

    # ─────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────

    def fetch_rows(self) -> SheetResult:
        """All ledger rows, in sheet order. ``data`` is a List[LedgerRow]."""
        try:
            values = self._ledger().get_all_values()
        except Exception as e:
            get_logger().error(f"Failed to read ledger: {e}", component="Ledger")
            return SheetResult(False, message=f"Failed to read orders: {e}", error_type='transport')

        rows = []
        for idx, record in enumerate(rows_to_records(values)):
            row = parse_ledger_record(record, row_number=idx + 2)
            if row.order_id:
                rows.append(row)
        return SheetResult(True, data=rows)

    def fetch_order(self, order_id: str) -> SheetResult:
        """Rows written under exactly ``order_id``."""
        result = self.fetch_rows()
        if not result.success:
            return result
        rows = rows_for_order(result.data, order_id)
        if not rows:
            return SheetResult(False, data=[], message=f"Order {order_id} not found",
                               error_type='not_found')
        return SheetResult(True, data=rows)

    # ─────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────

    def append_rows(self, rows: Sequence[LedgerRow]) -> SheetResult:
        """
        Append ledger rows one API call per row.

        ``data`` is the number of rows actually written, also on failure.
        """
        written = 0
        try:
            ws = self._ledger()
            for row in rows:
                ws.append_row(row.to_row(), value_input_option="USER_ENTERED")
                written += 1
        except Exception as e:
            get_logger().error(
                f"Ledger append failed after {written}/{len(rows)} row(s): {e}",
                component="Ledger",
            )
            return SheetResult(False, data=written, message=f"Failed to append order rows: {e}",
                               error_type='transport')
        return SheetResult(True, data=written)

    def append_order_group(self, group: OrderGroup, requester: Employee,
                           when: Optional[datetime] = None) -> SheetResult:
        rows = build_ledger_rows(group, requester, when)
        result = self.append_rows(rows)
        get_logger().log_ledger_append(group.order_id, result.data or 0, len(rows))
        return result

    def receive(self, order_id: str, product_names: Optional[Sequence[str]] = None,
                when: Optional[datetime] = None) -> ReceiveResult:
        """
        Mark Pending rows of ``order_id`` as Received.

        Args:
            order_id: Order identifier; must match at least one row exactly.
            product_names: Restrict to rows whose product name is in this
                list (exact string match). None means every Pending row.
            when: Received timestamp. Defaults to now.

        Returns:
            ReceiveResult with ``error_type`` 'not_found' when no row has the
            id, 'nothing_changed' when rows exist but none were Pending (or
            selected), 'transport' when the sheet could not be read/written.
        """
        when = when or datetime.now()
        names = None if product_names is None else set(product_names)
        selected = sorted(names) if names is not None else []

        try:
            ws = self._ledger()
            values = ws.get_all_values()
        except Exception as e:
            get_logger().error(f"Receive {order_id}: ledger read failed: {e}", component="Ledger")
            return ReceiveResult(False, order_id, message=f"Failed to read orders: {e}",
                                 error_type='transport', product_names=selected)

        if not values:
            return ReceiveResult(False, order_id, message=f"Order {order_id} not found",
                                 error_type='not_found', product_names=selected)

        headers = [str(h) for h in values[0]]
        aliases = config.LEDGER_FIELD_ALIASES
        status_col = find_column(headers, aliases['status'])
        received_date_col = find_column(headers, aliases['received_date'])
        received_qty_col = find_column(headers, aliases['received_qty'])
        if status_col is None:
            return ReceiveResult(False, order_id, message="Orders sheet has no Status column",
                                 error_type='transport', product_names=selected)

        matching = []
        for idx, record in enumerate(rows_to_records(values)):
            row = parse_ledger_record(record, row_number=idx + 2)
            if row.order_id == order_id:
                matching.append(row)

        if not matching:
            return ReceiveResult(False, order_id, message=f"Order {order_id} not found",
                                 error_type='not_found', product_names=selected)

        changed = 0
        timestamp = when.strftime(TIMESTAMP_FORMAT)
        try:
            for row in matching:
                if row.status == RowStatus.RECEIVED:
                    continue
                if names is not None and row.product_name not in names:
                    continue
                ws.update_cell(row.row_number, status_col, RowStatus.RECEIVED.value)
                if received_date_col:
                    ws.update_cell(row.row_number, received_date_col, timestamp)
                if received_qty_col:
                    ws.update_cell(row.row_number, received_qty_col, row.quantity)
                changed += 1
        except Exception as e:
            get_logger().error(
                f"Receive {order_id}: update failed after {changed} row(s): {e}",
                component="Ledger",
            )
            return ReceiveResult(False, order_id, changed=changed, found=True,
                                 message=f"Failed to update order rows: {e}",
                                 error_type='transport', product_names=selected)

        get_logger().log_receive(order_id, changed, product_names)
        if changed == 0:
            return ReceiveResult(False, order_id, found=True,
                                 message=f"Order {order_id} has no pending items to receive",
                                 error_type='nothing_changed', product_names=selected)
        return ReceiveResult(True, order_id, changed=changed, found=True,
                             message=f"Received {changed} item(s) for {order_id}",
                             product_names=selected)
