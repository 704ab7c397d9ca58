"""
Order routes - history, single order with derived status, order document and QR image download.
"""
import os
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse

from supply_orders import config
from supply_orders.api.dependencies import get_ledger
from supply_orders.api.helpers import unwrap
from supply_orders.orders.pdf_generator import pdf_filename
from supply_orders.orders.qr_code import qr_filename
from supply_orders.orders.status import HISTORY_TABS, group_rows, history_view

router = APIRouter()

_SAFE_ORDER_ID = re.compile(r'^[A-Za-z0-9_-]+$')


def _document_path(order_id: str, filename: str) -> str:
    if not _SAFE_ORDER_ID.match(order_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid order id")
    path = os.path.join(config.ORDER_FOLDER, filename)
    if not os.path.exists(path):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order document not found")
    return path


@router.get(
    "",
    summary="Order history",
)
async def list_orders(
    tab: str = Query("all", description="all, pending or received (filters rows)"),
    q: Optional[str] = Query(None, description="Order id, supplier, orderer or product"),
    ledger=Depends(get_ledger),
):
    """Newest first, grouped by order id with the derived order status."""
    if tab not in HISTORY_TABS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"tab must be one of: {', '.join(HISTORY_TABS)}",
        )
    groups = history_view(unwrap(ledger.fetch_rows()), tab=tab, term=q)
    return {"orders": [g.to_dict() for g in groups], "count": len(groups)}


@router.get(
    "/{order_id}",
    summary="Get one order",
)
async def get_order(order_id: str, ledger=Depends(get_ledger)):
    rows = unwrap(ledger.fetch_order(order_id))
    return group_rows(rows)[0].to_dict()


@router.get(
    "/{order_id}/pdf",
    summary="Download the order document",
)
async def download_order_pdf(order_id: str):
    """Documents are kept on the API host; older ones may have been cleaned up."""
    return FileResponse(
        _document_path(order_id, pdf_filename(order_id)),
        media_type="application/pdf",
        filename=pdf_filename(order_id),
    )


@router.get(
    "/{order_id}/qr",
    summary="Download the order QR code image",
)
async def download_order_qr(order_id: str):
    return FileResponse(
        _document_path(order_id, qr_filename(order_id)),
        media_type="image/svg+xml",
        filename=qr_filename(order_id),
    )
