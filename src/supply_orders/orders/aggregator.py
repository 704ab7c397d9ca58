"""
Supplier Aggregation
====================

Splits a flat cart into one order group per supplier. Each group is
submitted, documented and received independently under its own order id.

Identifiers:
- base id: ``ORD-<epoch millis>`` taken once per submission
- multi-supplier submission: ``<base id>-<n>``, n = 1, 2, ... in the order
  suppliers were first seen in the cart
- legacy single-supplier submission: the base id itself

Two submissions in the same millisecond can collide; nothing guards
against that.
"""
from __future__ import annotations

import time
from typing import Dict, List, Optional, Sequence

from supply_orders import config
from supply_orders.models import CartLine, OrderGroup


def generate_base_order_id(now_millis: Optional[int] = None) -> str:
    """Base id for one submission, from the current epoch time in ms."""
    if now_millis is None:
        now_millis = int(time.time() * 1000)
    return f"{config.ORDER_ID_PREFIX}{now_millis}"


def supplier_of(line: CartLine) -> str:
    return line.product.supplier or config.SUPPLIER_PLACEHOLDER


def group_by_supplier(cart_lines: Sequence[CartLine], base_id: str) -> List[OrderGroup]:
    """
    Partition cart lines by supplier name and number the partitions.

    Supplier names are compared exactly (no case or whitespace folding).
    Partition order is first-seen order, so the same cart always yields
    the same ids for a given base id.
    """
    partitions: Dict[str, List[CartLine]] = {}
    for line in cart_lines:
        partitions.setdefault(supplier_of(line), []).append(line)

    groups = []
    for index, (supplier, lines) in enumerate(partitions.items(), start=1):
        groups.append(OrderGroup(
            order_id=f"{base_id}-{index}",
            supplier=supplier,
            lines=list(lines),
            subtotal=sum(l.product.price * l.quantity for l in lines),
        ))
    return groups


def build_legacy_group(cart_lines: Sequence[CartLine], base_id: str) -> OrderGroup:
    """
    Single order group for the legacy flow: the whole cart under the bare
    base id, regardless of supplier.
    """
    suppliers = []
    for line in cart_lines:
        name = supplier_of(line)
        if name not in suppliers:
            suppliers.append(name)
    return OrderGroup(
        order_id=base_id,
        supplier=" / ".join(suppliers),
        lines=list(cart_lines),
        subtotal=sum(l.product.price * l.quantity for l in cart_lines),
    )
