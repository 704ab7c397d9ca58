"""
FastAPI dependencies for the workbook-backed services.
Each collaborator is created on first use and can be replaced with
``app.dependency_overrides`` in tests.
"""
from typing import Dict, Optional

from fastapi import HTTPException, status

from supply_orders.orders.cart import CartSession

# Created on first use
_spreadsheet = None
_ledger = None
_catalog = None
_notifier = None


class CartStore:
    """In-memory cart sessions keyed by cart id. Lost on restart."""

    def __init__(self):
        self._carts: Dict[str, CartSession] = {}

    def create(self) -> CartSession:
        cart = CartSession()
        self._carts[cart.cart_id] = cart
        return cart

    def get(self, cart_id: str) -> Optional[CartSession]:
        return self._carts.get(cart_id)


_cart_store = CartStore()


def _get_spreadsheet():
    global _spreadsheet
    if _spreadsheet is None:
        from supply_orders.sheets.client import open_spreadsheet
        try:
            _spreadsheet = open_spreadsheet()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Workbook unavailable: {e}",
            )
    return _spreadsheet


def get_ledger():
    """Get the order ledger wrapper."""
    global _ledger
    if _ledger is None:
        from supply_orders.sheets.ledger_sheets import OrderLedgerSheets
        _ledger = OrderLedgerSheets.from_spreadsheet(_get_spreadsheet())
    return _ledger


def get_catalog():
    """Get the catalog (Products / EmpList) wrapper."""
    global _catalog
    if _catalog is None:
        from supply_orders.sheets.catalog_sheets import CatalogSheets
        _catalog = CatalogSheets.from_spreadsheet(_get_spreadsheet())
    return _catalog


def get_notifier():
    """Get the order email notifier."""
    global _notifier
    if _notifier is None:
        from supply_orders.notifications.email_notifier import OrderNotifier
        _notifier = OrderNotifier()
    return _notifier


def get_cart_store() -> CartStore:
    return _cart_store
