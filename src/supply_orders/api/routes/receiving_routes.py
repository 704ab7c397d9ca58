"""
Receiving routes - pending orders, QR scan lookup, mark items received.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from supply_orders.api.dependencies import get_ledger
from supply_orders.api.helpers import raise_for_error, unwrap
from supply_orders.receiving.reconciler import ReceivingReconciler

router = APIRouter()


class ReceiveRequest(BaseModel):
    """Omit ``product_names`` to receive every pending line of the order."""
    product_names: Optional[List[str]] = None


@router.get(
    "/pending",
    summary="Orders with pending lines",
)
async def pending_orders(
    q: Optional[str] = Query(None, description="Order id, supplier or orderer"),
    ledger=Depends(get_ledger),
):
    groups = unwrap(ReceivingReconciler(ledger).pending_orders(q))
    return {"orders": [g.to_dict() for g in groups], "count": len(groups)}


@router.get(
    "/scan",
    summary="Resolve scanned QR text to pending orders",
)
async def scan_lookup(
    code: str = Query(..., description="Raw text read by the scanner"),
    ledger=Depends(get_ledger),
):
    groups = unwrap(ReceivingReconciler(ledger).lookup_scanned(code))
    return {"orders": [g.to_dict() for g in groups], "count": len(groups)}


@router.post(
    "/{order_id}",
    summary="Mark an order (or some of its lines) received",
)
async def receive_order(
    order_id: str,
    body: Optional[ReceiveRequest] = None,
    ledger=Depends(get_ledger),
):
    """
    Received lines are skipped, so repeating a request is harmless: the
    second call answers 409 with nothing changed.
    """
    product_names = body.product_names if body else None
    outcome, pending = ReceivingReconciler(ledger).receive_and_refresh(order_id, product_names)
    if not outcome.success:
        raise_for_error(outcome.error_type, outcome.message)

    response = outcome.to_dict()
    if pending.success:
        response["pending"] = [g.to_dict() for g in pending.data]
    return response
