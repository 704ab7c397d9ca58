"""
Order status derivation and ledger views.

Aggregate status is never stored: every read groups the ledger rows by
order id and derives it from the per-row statuses.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from supply_orders import config
from supply_orders.models import AggregateStatus, LedgerGroup, LedgerRow, RowStatus

HISTORY_TABS = ('all', 'pending', 'received')


def derive_status(rows: Iterable[LedgerRow]) -> AggregateStatus:
    """
    All rows Received -> Received, all Pending -> Pending, otherwise Partial.

    Raises:
        ValueError: when ``rows`` is empty.
    """
    statuses = [row.status for row in rows]
    if not statuses:
        raise ValueError("Cannot derive a status from zero ledger rows")
    if all(s == RowStatus.RECEIVED for s in statuses):
        return AggregateStatus.RECEIVED
    if all(s == RowStatus.PENDING for s in statuses):
        return AggregateStatus.PENDING
    return AggregateStatus.PARTIAL


def group_rows(rows: Iterable[LedgerRow]) -> List[LedgerGroup]:
    """Group rows by order id (first-seen order) and attach derived status."""
    groups: Dict[str, LedgerGroup] = {}
    for row in rows:
        group = groups.get(row.order_id)
        if group is None:
            group = LedgerGroup(
                order_id=row.order_id,
                date=row.date,
                supplier=row.supplier,
                orderer=row.orderer,
            )
            groups[row.order_id] = group
        group.rows.append(row)

    for group in groups.values():
        group.status = derive_status(group.rows)
    return list(groups.values())


def rows_for_order(rows: Iterable[LedgerRow], order_id: str) -> List[LedgerRow]:
    return [row for row in rows if row.order_id == order_id]


def _strip_id_prefix(value: str) -> str:
    """Lowercase and drop one leading order id prefix, if present."""
    value = value.lower().strip()
    prefix = config.ORDER_ID_PREFIX.lower()
    if prefix and value.startswith(prefix):
        return value[len(prefix):].strip()
    return value


def matches_search(row: LedgerRow, term: str, include_product: bool = True) -> bool:
    """
    Case-insensitive substring search over order id, supplier and orderer
    (and product name for the history view). A leading ``ORD-`` is ignored
    on both sides so people can type just the digits.
    """
    needle = _strip_id_prefix(term)
    if not needle:
        return True
    haystack = [
        _strip_id_prefix(str(row.order_id)),
        str(row.supplier).lower(),
        str(row.orderer).lower(),
    ]
    if include_product:
        haystack.append(str(row.product_name).lower())
    return any(needle in field for field in haystack)


def _parse_date(value: str) -> datetime:
    for fmt in ('%Y-%m-%d %H:%M:%S', '%Y-%m-%dT%H:%M:%S', '%Y/%m/%d %H:%M:%S', '%Y-%m-%d'):
        try:
            return datetime.strptime(value.strip(), fmt)
        except (ValueError, AttributeError):
            continue
    return datetime.min


def history_view(rows: Iterable[LedgerRow], tab: str = 'all',
                 term: Optional[str] = None) -> List[LedgerGroup]:
    """
    Order history: newest first, row-level tab filter, search, then grouped.

    The tab filter applies to rows, so an order that is partially received
    shows up under both 'pending' and 'received' with only the matching rows.
    """
    if tab not in HISTORY_TABS:
        raise ValueError(f"Unknown history tab: {tab}")

    result = sorted(rows, key=lambda r: _parse_date(r.date), reverse=True)
    if tab == 'pending':
        result = [r for r in result if r.status == RowStatus.PENDING]
    elif tab == 'received':
        result = [r for r in result if r.status == RowStatus.RECEIVED]

    if term:
        result = [r for r in result if matches_search(r, term, include_product=True)]

    return group_rows(result)
